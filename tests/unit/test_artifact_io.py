"""
Proof Artifact IO Tests
Tests for orchestrator/artifacts/io.py

Tests:
- save -> load preserves the proof and its scheme binding
- saved bytes are canonical and stable
- missing files, bad JSON, missing keys, bad versions and wrong-typed
  fields are reported
"""
import json

import pytest

from core.merkle import CanonicalLeaf, HashableString, MerkleTree
from core.schemas.errors import ErrorCodes, HashSchemeException, ProofDecodeException
from orchestrator.artifacts import (
    ArtifactFormatError,
    ArtifactIOError,
    ProofArtifact,
    compute_sha256,
    load_proof_artifact,
    save_proof_artifact,
)


@pytest.fixture
def artifact(ten_leaf_tree):
    return ProofArtifact(
        scheme="string-sha256",
        height=ten_leaf_tree.height,
        index=4,
        proof=ten_leaf_tree.get_merkle_proof(4),
    )


class TestSaveLoad:
    """Tests for persisting and reloading artifacts."""

    def test_round_trip(self, tmp_path, artifact):
        path, digest = save_proof_artifact(artifact, tmp_path / "proof.json")
        loaded, loaded_digest = load_proof_artifact(path)

        assert loaded_digest == digest
        assert loaded.scheme == "string-sha256"
        assert loaded.height == 128
        assert loaded.index == 4
        assert loaded.proof == artifact.proof
        assert loaded.proof.hashable is HashableString
        assert loaded.proof.is_valid()

    def test_written_bytes_are_canonical(self, tmp_path, artifact):
        path, digest = save_proof_artifact(artifact, tmp_path / "proof.json")
        data = path.read_bytes()

        assert data == artifact.to_bytes()
        assert digest == compute_sha256(data)
        assert json.loads(data)["schema_version"] == "v1"

    def test_resave_reproduces_bytes(self, tmp_path, artifact):
        first, _ = save_proof_artifact(artifact, tmp_path / "a.json")
        loaded, _ = load_proof_artifact(first)
        second, _ = save_proof_artifact(loaded, tmp_path / "b.json")

        assert first.read_bytes() == second.read_bytes()

    def test_creates_parent_directories(self, tmp_path, artifact):
        path, _ = save_proof_artifact(artifact, tmp_path / "nested" / "dir" / "proof.json")
        assert path.exists()

    def test_canonical_scheme_round_trip(self, tmp_path):
        tree = MerkleTree(8, CanonicalLeaf)
        tree.set_leaf(1, CanonicalLeaf({"k": "v"}))
        artifact = ProofArtifact(
            scheme="canonical-sha256", height=8, index=1, proof=tree.get_merkle_proof(1)
        )

        path, _ = save_proof_artifact(artifact, tmp_path / "c.json")
        loaded, _ = load_proof_artifact(path)

        assert loaded.proof.hashable is CanonicalLeaf
        assert loaded.proof.is_valid()


class TestLoadErrors:
    """Tests for malformed or missing artifacts."""

    def test_missing_file(self, tmp_path):
        with pytest.raises(ArtifactIOError, match="not found"):
            load_proof_artifact(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{not json")

        with pytest.raises(ArtifactFormatError, match="not valid JSON"):
            load_proof_artifact(path)

    def test_not_an_object(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")

        with pytest.raises(ArtifactFormatError, match="JSON object"):
            load_proof_artifact(path)

    def test_missing_keys(self, tmp_path):
        path = tmp_path / "partial.json"
        path.write_text(json.dumps({"schema_version": "v1", "scheme": "string-sha256"}))

        with pytest.raises(ArtifactFormatError, match="missing keys"):
            load_proof_artifact(path)

    def test_unsupported_version(self, tmp_path, artifact):
        data = json.loads(artifact.to_bytes())
        data["schema_version"] = "v0"
        path = tmp_path / "old.json"
        path.write_text(json.dumps(data))

        with pytest.raises(ArtifactFormatError, match="Unsupported") as exc_info:
            load_proof_artifact(path)
        assert exc_info.value.code == ErrorCodes.UNSUPPORTED_VERSION

    def test_unknown_scheme(self, tmp_path, artifact):
        data = json.loads(artifact.to_bytes())
        data["scheme"] = "blake3"
        path = tmp_path / "scheme.json"
        path.write_text(json.dumps(data))

        with pytest.raises(HashSchemeException):
            load_proof_artifact(path)

    def test_corrupt_proof(self, tmp_path, artifact):
        data = json.loads(artifact.to_bytes())
        data["proof"]["root"] = "not-hex"
        path = tmp_path / "corrupt.json"
        path.write_text(json.dumps(data))

        with pytest.raises(ProofDecodeException):
            load_proof_artifact(path)

    def test_io_error_records_path(self, tmp_path):
        with pytest.raises(ArtifactIOError) as exc_info:
            load_proof_artifact(tmp_path / "x.json")
        assert exc_info.value.details["path"].endswith("x.json")
        assert exc_info.value.code == ErrorCodes.ARTIFACT_IO_ERROR


class TestFieldTypes:
    """Wrong-typed envelope fields are format errors, not bare builtins."""

    def _write(self, tmp_path, artifact, **overrides):
        data = json.loads(artifact.to_bytes())
        data.update(overrides)
        path = tmp_path / "typed.json"
        path.write_text(json.dumps(data))
        return path

    @pytest.mark.parametrize("value", ["tall", 8.0, None, True])
    def test_height_must_be_int(self, tmp_path, artifact, value):
        path = self._write(tmp_path, artifact, height=value)

        with pytest.raises(ArtifactFormatError, match="'height' must be an integer") as exc_info:
            load_proof_artifact(path)
        assert exc_info.value.code == ErrorCodes.SCHEMA_VALIDATION_ERROR
        assert exc_info.value.details["path"] == str(path)

    @pytest.mark.parametrize("value", ["4", [4], False])
    def test_index_must_be_int(self, tmp_path, artifact, value):
        path = self._write(tmp_path, artifact, index=value)

        with pytest.raises(ArtifactFormatError, match="'index' must be an integer"):
            load_proof_artifact(path)

    @pytest.mark.parametrize("value", [["x"], {"name": "string-sha256"}, 3])
    def test_scheme_must_be_str(self, tmp_path, artifact, value):
        path = self._write(tmp_path, artifact, scheme=value)

        with pytest.raises(ArtifactFormatError, match="'scheme' must be a string"):
            load_proof_artifact(path)

    def test_unhashable_version(self, tmp_path, artifact):
        path = self._write(tmp_path, artifact, schema_version=["v1"])

        with pytest.raises(ArtifactFormatError) as exc_info:
            load_proof_artifact(path)
        assert exc_info.value.code == ErrorCodes.UNSUPPORTED_VERSION

    def test_format_errors_are_io_errors(self, tmp_path, artifact):
        path = self._write(tmp_path, artifact, height="tall")

        with pytest.raises(ArtifactIOError):
            load_proof_artifact(path)
