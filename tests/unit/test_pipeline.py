"""
Proof Pipeline Tests
Tests for orchestrator/pipeline.py and orchestrator/verifier_program.py

Tests:
- default run builds, proves, verifies, persists and replays
- verifier output is a pure function of (blob, scheme)
- contract violations are reported on the result, not raised
"""
import json

import pytest

from core.config import RuntimeConfig
from core.merkle import CanonicalLeaf, HashableString, MerkleTree
from core.schemas.errors import ErrorCodes, ProofDecodeException
from orchestrator import ProofPipeline, create_pipeline, run_verifier
from orchestrator.artifacts import load_proof_artifact


class TestVerifierProgram:
    """Tests for the verifying context."""

    def test_valid_proof_commits_true(self, ten_leaf_tree):
        blob = ten_leaf_tree.get_merkle_proof(0).to_bytes()
        output = run_verifier(blob, HashableString)

        assert output.valid is True
        assert output.scheme == "string-sha256"
        assert len(output.proof_sha256) == 64

    def test_tampered_proof_commits_false(self, ten_leaf_tree):
        data = json.loads(ten_leaf_tree.get_merkle_proof(0).to_json())
        data["root"] = "0x" + "00" * 32
        blob = json.dumps(data).encode("utf-8")

        assert run_verifier(blob, HashableString).valid is False

    def test_commitment_is_deterministic(self, ten_leaf_tree):
        blob = ten_leaf_tree.get_merkle_proof(3).to_bytes()

        first = run_verifier(blob, HashableString)
        second = run_verifier(blob, HashableString)

        assert first == second
        assert first.commitment() == second.commitment()

    def test_commitment_is_canonical_json(self, ten_leaf_tree):
        output = run_verifier(ten_leaf_tree.get_merkle_proof(3).to_bytes(), HashableString)
        decoded = json.loads(output.commitment())

        assert decoded == output.to_dict()

    def test_garbage_blob_raises(self):
        with pytest.raises(ProofDecodeException):
            run_verifier(b"\x00\x01", HashableString)


class TestPipelineRun:
    """Tests for end-to-end driver runs."""

    def test_default_run(self, tmp_path):
        pipeline = create_pipeline(height=16, leaf_count=10, proof_path=tmp_path / "p.json")

        result = pipeline.run()

        assert result.ok
        assert result.verifier_output.valid
        assert result.artifact_path == tmp_path / "p.json"
        assert [c.check_id for c in result.checks] == [
            "tree_verify",
            "proof_valid",
            "artifact_round_trip",
            "expected_result",
        ]
        assert set(result.timings_ms) == {"build", "prove", "verify"}

    def test_persisted_artifact_verifies(self, tmp_path):
        result = create_pipeline(height=8, proof_index=5, proof_path=tmp_path / "p.json").run()
        artifact, digest = load_proof_artifact(result.artifact_path)

        assert digest == result.artifact_sha256
        assert artifact.index == 5
        assert artifact.proof.root == result.root
        assert artifact.proof.is_valid()

    def test_no_persist_skips_round_trip(self, tmp_path):
        pipeline = create_pipeline(height=8, proof_path=tmp_path / "p.json", persist=False)

        result = pipeline.run()

        assert result.ok
        assert result.artifact_path is None
        assert result.verification.get_check("artifact_round_trip") is None
        assert not (tmp_path / "p.json").exists()

    def test_root_matches_manual_tree(self, tmp_path):
        result = create_pipeline(height=32, leaf_count=4, persist=False).run()

        tree = MerkleTree(32, HashableString)
        for i in range(4):
            tree.set_leaf(i, HashableString(i))

        assert result.root == tree.get_root()

    def test_custom_leaves(self):
        config = RuntimeConfig.from_dict({"tree": {"height": 8, "scheme": "canonical-sha256"}})
        pipeline = ProofPipeline(config, persist=False)

        result = pipeline.run([CanonicalLeaf({"n": i}) for i in range(3)])

        assert result.ok
        assert result.proof.hashable is CanonicalLeaf

    def test_expected_invalid_mismatch_fails(self):
        config = RuntimeConfig.from_dict({
            "tree": {"height": 8},
            "driver": {"expected_valid": False},
        })

        result = ProofPipeline(config, persist=False).run()

        assert result.verifier_output.valid is True
        assert not result.ok
        assert not result.verification.get_check("expected_result").ok

    def test_to_dict_is_json_safe(self, tmp_path):
        result = create_pipeline(height=8, proof_path=tmp_path / "p.json").run()
        data = json.loads(json.dumps(result.to_dict()))

        assert data["ok"] is True
        assert data["valid"] is True
        assert data["root"].startswith("0x")


class TestPipelineErrors:
    """Contract violations are captured on the result."""

    def test_bad_height(self):
        result = create_pipeline(height=7, persist=False).run()

        assert not result.ok
        assert result.verification.error.code == ErrorCodes.INVALID_TREE_HEIGHT
        assert "Invalid height" in result.errors[0]

    def test_index_out_of_range(self):
        result = create_pipeline(height=8, proof_index=128, persist=False).run()

        assert not result.ok
        assert result.verification.error.code == ErrorCodes.LEAF_INDEX_OUT_OF_RANGE

    def test_too_many_leaves(self):
        result = create_pipeline(height=8, leaf_count=129, persist=False).run()

        assert not result.ok
        assert result.root is None

    def test_unknown_scheme(self):
        result = create_pipeline(scheme="blake3", persist=False).run()

        assert not result.ok
        assert result.verification.error.code == ErrorCodes.UNKNOWN_HASH_SCHEME
