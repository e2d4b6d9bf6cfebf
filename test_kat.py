import hashlib
from pathlib import Path

import pytest
import yaml

import kat
from errors import ConfigurationError


VECTOR_FILE = Path(__file__).parent / "vectors" / "sha_kat.yaml"

ORACLES = {
    "SHA-1": hashlib.sha1,
    "SHA-224": hashlib.sha224,
    "SHA-256": hashlib.sha256,
    "SHA-384": hashlib.sha384,
    "SHA-512": hashlib.sha512,
}


def test_bundled_vectors_cover_every_algorithm():
    vectors = kat.load_vectors(str(VECTOR_FILE))
    assert {v.algorithm for v in vectors} == set(ORACLES)


def test_bundled_vectors_agree_with_hashlib():
    for v in kat.load_vectors(str(VECTOR_FILE)):
        assert ORACLES[v.algorithm](v.message * v.repeat).digest() == v.digest


def test_bundled_vectors_pass():
    results = kat.run_vectors(kat.load_vectors(str(VECTOR_FILE)))
    assert results
    assert all(r.passed for r in results)


@pytest.mark.parametrize("chunk_size", [1, 13, 64])
@pytest.mark.parametrize("strategy", ["portable", "unrolled"])
def test_short_vectors_pass_in_chunks(chunk_size, strategy):
    vectors = [v for v in kat.load_vectors(str(VECTOR_FILE)) if v.repeat == 1]
    results = kat.run_vectors(vectors, strategy=strategy, chunk_size=chunk_size)
    assert all(r.passed for r in results)


def test_mismatch_is_reported():
    document = {"vectors": [{"algorithm": "sha1", "message": "abc", "digest": "00" * 20}]}
    results = kat.run_vectors(kat.parse_vectors(document))
    assert len(results) == 1
    assert not results[0].passed
    assert results[0].actual == hashlib.sha1(b"abc").digest()


def test_message_hex_and_repeat():
    document = {
        "vectors": [
            {
                "algorithm": "SHA-256",
                "message_hex": "0001ff",
                "repeat": 3,
                "digest": hashlib.sha256(b"\x00\x01\xff" * 3).hexdigest(),
            }
        ]
    }
    (vector,) = kat.parse_vectors(document)
    assert vector.message == b"\x00\x01\xff"
    assert vector.repeat == 3
    assert kat.run_vectors([vector])[0].passed


@pytest.mark.parametrize(
    "document",
    [
        None,
        {"vectors": "nope"},
        {"vectors": ["not a mapping"]},
        {"vectors": [{"algorithm": "sha256", "message": "abc"}]},
        {"vectors": [{"algorithm": "md5", "message": "abc", "digest": "00"}]},
        {"vectors": [{"algorithm": "sha1", "message": "abc", "digest": "zz"}]},
        {"vectors": [{"algorithm": "sha1", "message": "", "repeat": 0, "digest": "00"}]},
        {"vectors": [{"algorithm": "sha256", "message": True, "digest": "00"}]},
        {"vectors": [{"algorithm": "sha256", "message": None, "digest": "00"}]},
        {"vectors": [{"algorithm": "sha256", "message_hex": 10, "digest": "00"}]},
        {"vectors": [{"algorithm": "sha256", "message": "abc", "digest": 1234}]},
    ],
)
def test_malformed_vectors(document):
    with pytest.raises(ConfigurationError):
        kat.parse_vectors(document)


@pytest.mark.parametrize(
    "line",
    ["message: yes", "message: null", "message_hex: 0012", "message: 42"],
)
def test_unquoted_yaml_scalars_are_rejected(tmp_path, line):
    """Fields YAML would resolve to a non-string are refused, not re-stringified."""
    path = tmp_path / "typed.yaml"
    path.write_text(f"vectors:\n  - algorithm: SHA-256\n    {line}\n    digest: 'ab'\n")
    with pytest.raises(ConfigurationError, match="must be a quoted string"):
        kat.load_vectors(str(path))


def test_quoted_yaml_scalars_keep_their_text(tmp_path):
    path = tmp_path / "quoted.yaml"
    path.write_text(
        "vectors:\n"
        "  - algorithm: SHA-256\n"
        "    message: 'yes'\n"
        "    digest: 'ab'\n"
        "  - algorithm: SHA-256\n"
        "    message_hex: '0012'\n"
        "    digest: 'ab'\n"
    )
    first, second = kat.load_vectors(str(path))
    assert first.message == b"yes"
    assert second.message == b"\x00\x12"


def test_unparsable_file(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("vectors: [unclosed\n")
    with pytest.raises(ConfigurationError):
        kat.load_vectors(str(path))


def test_write_report(tmp_path):
    document = {
        "vectors": [
            {"algorithm": "sha1", "message": "abc", "digest": hashlib.sha1(b"abc").hexdigest()},
            {"algorithm": "sha512", "message": "abc", "digest": "00" * 64},
        ]
    }
    results = kat.run_vectors(kat.parse_vectors(document))
    path = tmp_path / "report.yaml"
    kat.write_report(results, str(path))

    report = yaml.safe_load(path.read_text())
    assert report["total"] == 2
    assert report["failed"] == 1
    assert report["results"][0]["passed"] is True
    assert report["results"][0]["message_hex"] == "616263"
    assert report["results"][1]["actual"] == hashlib.sha512(b"abc").hexdigest()
