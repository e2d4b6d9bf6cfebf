"""Known-answer validation against YAML test-vector files.

File format:

    vectors:
      - algorithm: SHA-256
        message: abc              # UTF-8 text, or
        message_hex: 616263       # raw bytes in hex
        repeat: 1                 # optional, message is repeated this often
        digest: ba7816bf...

`run_vectors` hashes every entry and reports a `VectorResult` per entry;
`write_report` dumps those results back to YAML.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Union

import yaml

from errors import ConfigurationError, UnknownAlgorithmError
from sha_constants import get_descriptor
from sha_engine import HashContext
from strategy import TransformStrategy


log = logging.getLogger("[KAT]")

_BATCH_BYTES = 1 << 16


@dataclass(frozen=True)
class KnownAnswer:
    algorithm: str
    message: bytes
    repeat: int
    digest: bytes


@dataclass(frozen=True)
class VectorResult:
    vector: KnownAnswer
    actual: bytes

    @property
    def passed(self) -> bool:
        return self.actual == self.vector.digest


def _text_field(idx: int, entry: Dict, key: str) -> str:
    value = entry[key]
    if not isinstance(value, str):
        # YAML 1.1 resolves unquoted yes / null / 0012 to bool / None / int
        raise ConfigurationError(f"Vector {idx}: {key!r} must be a quoted string")
    return value


def _parse_entry(idx: int, entry: Dict) -> KnownAnswer:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Vector {idx}: expected a mapping, got {type(entry).__name__}")

    try:
        algorithm = get_descriptor(str(entry["algorithm"])).name
        if "message_hex" in entry:
            message = bytes.fromhex(_text_field(idx, entry, "message_hex"))
        elif "message" in entry:
            message = _text_field(idx, entry, "message").encode("utf-8")
        else:
            message = b""
        repeat = int(entry.get("repeat", 1))
        digest = bytes.fromhex(_text_field(idx, entry, "digest"))
    except KeyError as e:
        raise ConfigurationError(f"Vector {idx}: missing field {e}") from None
    except (UnknownAlgorithmError, ValueError) as e:
        raise ConfigurationError(f"Vector {idx}: {e}") from None

    if repeat < 1:
        raise ConfigurationError(f"Vector {idx}: repeat must be positive, got {repeat}")
    return KnownAnswer(algorithm, message, repeat, digest)


def parse_vectors(document) -> List[KnownAnswer]:
    """Build test vectors from an already-parsed YAML document."""
    if not isinstance(document, dict) or not isinstance(document.get("vectors"), list):
        raise ConfigurationError("Vector file must contain a top-level 'vectors' list")
    return [_parse_entry(idx, entry) for idx, entry in enumerate(document["vectors"])]


def load_vectors(path: str) -> List[KnownAnswer]:
    """Read the vector file at `path`."""
    with open(path, "r") as f:
        try:
            document = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse vector file '{path}': {e}") from None
    vectors = parse_vectors(document)
    log.info("loaded %d vectors from %s", len(vectors), path)
    return vectors


def run_vectors(
    vectors: List[KnownAnswer],
    strategy: Union[str, TransformStrategy, None] = None,
    chunk_size: Optional[int] = None,
) -> List[VectorResult]:
    """Hash every vector and collect the results.

    With `chunk_size`, each message is fed in pieces of that many bytes to
    exercise the buffering path.
    """
    results: List[VectorResult] = []
    for vector in vectors:
        ctx = HashContext(vector.algorithm, strategy=strategy)
        # repeated messages are fed in batches of about 64 KiB
        per_batch = max(1, _BATCH_BYTES // max(1, len(vector.message)))
        remaining = vector.repeat
        while remaining:
            n = min(per_batch, remaining)
            data = vector.message * n
            if chunk_size:
                for i in range(0, len(data), chunk_size):
                    ctx.update(data[i : i + chunk_size])
            else:
                ctx.update(data)
            remaining -= n
        result = VectorResult(vector, ctx.finalize())
        if not result.passed:
            log.error(
                "%s mismatch: expected %s, got %s",
                vector.algorithm,
                vector.digest.hex(),
                result.actual.hex(),
            )
        results.append(result)

    failed = sum(1 for r in results if not r.passed)
    log.info("%d vectors, %d passed, %d failed", len(results), len(results) - failed, failed)
    return results


def write_report(results: List[VectorResult], path: str) -> None:
    """Write `results` as a YAML report."""
    report = {
        "total": len(results),
        "failed": sum(1 for r in results if not r.passed),
        "results": [
            {
                "algorithm": r.vector.algorithm,
                "message_hex": r.vector.message.hex(),
                "repeat": r.vector.repeat,
                "expected": r.vector.digest.hex(),
                "actual": r.actual.hex(),
                "passed": r.passed,
            }
            for r in results
        ],
    }
    with open(path, "w") as f:
        yaml.dump(report, f, default_flow_style=False, sort_keys=False)
