"""
CLI Tests
Tests for merkle_cli (prove, verify, run, schemes, config)

Commands are invoked through main(argv) and checked by exit code and
printed output.
"""
import argparse
import json

import pytest

from core.crypto.hashing import to_hex
from core.merkle import HashableString, MerkleTree
from merkle_cli.commands.verify import verify_cmd
from merkle_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)


@pytest.fixture(autouse=True)
def _work_in_tmp(tmp_path, monkeypatch):
    """Run each command from an empty directory so no merkle.json is picked up."""
    monkeypatch.chdir(tmp_path)


def _prove(tmp_path, *extra):
    out = tmp_path / "proof.json"
    code = main(["prove", "--height", "8", "--out", str(out), "--json", *extra])
    return code, out


class TestParser:
    """Tests for argument parsing."""

    def test_no_command_returns_error(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_leaf_sources_mutually_exclusive(self):
        parser = create_parser()
        with pytest.raises(SystemExit):
            parser.parse_args(["prove", "--count", "3", "--leaves", "a"])


class TestProveCommand:
    """Tests for `merkle prove`."""

    def test_prove_count(self, tmp_path, capsys):
        code, out = _prove(tmp_path, "--count", "5", "--index", "3")
        summary = json.loads(capsys.readouterr().out)

        tree = MerkleTree(8, HashableString)
        for i in range(5):
            tree.set_leaf(i, HashableString(i))

        assert code == EXIT_SUCCESS
        assert out.exists()
        assert summary["root"] == to_hex(tree.get_root())
        assert summary["index"] == 3
        assert summary["witness_length"] == 7
        assert summary["leaf_count"] == 5

    def test_prove_explicit_leaves(self, tmp_path, capsys):
        code, _ = _prove(tmp_path, "--leaves", "alice", "bob", "--index", "1")
        summary = json.loads(capsys.readouterr().out)

        assert code == EXIT_SUCCESS
        assert summary["leaf"] == to_hex(HashableString("bob").hash())

    def test_prove_leaf_file(self, tmp_path, capsys):
        leaf_file = tmp_path / "leaves.txt"
        leaf_file.write_text("a\nb\n\nc\n")

        code, _ = _prove(tmp_path, "--leaf-file", str(leaf_file), "--index", "2")
        summary = json.loads(capsys.readouterr().out)

        assert code == EXIT_SUCCESS
        assert summary["leaf_count"] == 3
        assert summary["leaf"] == to_hex(HashableString("c").hash())

    def test_prove_canonical_scheme(self, tmp_path, capsys):
        code, _ = _prove(
            tmp_path, "--scheme", "canonical-sha256", "--leaves", '{"a":1}', "plain"
        )
        summary = json.loads(capsys.readouterr().out)

        assert code == EXIT_SUCCESS
        assert summary["scheme"] == "canonical-sha256"

    def test_prove_index_out_of_range(self, tmp_path, capsys):
        code, out = _prove(tmp_path, "--index", "128")

        assert code == EXIT_RUNTIME_ERROR
        assert "out of range" in capsys.readouterr().err
        assert not out.exists()

    def test_prove_bad_height(self, tmp_path, capsys):
        code = main(["prove", "--height", "200", "--out", str(tmp_path / "p.json")])

        assert code == EXIT_RUNTIME_ERROR
        assert "Invalid height" in capsys.readouterr().err

    def test_prove_unknown_scheme(self, tmp_path, capsys):
        code, _ = _prove(tmp_path, "--scheme", "blake3")

        assert code == EXIT_RUNTIME_ERROR
        assert "Unknown hash scheme" in capsys.readouterr().err

    def test_prove_missing_leaf_file(self, tmp_path, capsys):
        code, _ = _prove(tmp_path, "--leaf-file", str(tmp_path / "nope.txt"))

        assert code == EXIT_RUNTIME_ERROR

    def test_prove_human_output(self, tmp_path, capsys):
        code = main(["prove", "--height", "8", "--out", str(tmp_path / "p.json")])

        assert code == EXIT_SUCCESS
        assert "witness: 7 entries" in capsys.readouterr().out


class TestVerifyCommand:
    """Tests for `merkle verify`."""

    def test_verify_valid(self, tmp_path, capsys):
        _, out = _prove(tmp_path, "--count", "4")
        capsys.readouterr()

        code = main(["verify", str(out), "--json"])
        report = json.loads(capsys.readouterr().out)

        assert code == EXIT_SUCCESS
        assert report["valid"] is True
        assert "root_ok" not in report

    def test_verify_expected_root(self, tmp_path, capsys):
        _, out = _prove(tmp_path, "--count", "4")
        root = json.loads(capsys.readouterr().out)["root"]

        assert main(["verify", str(out), "--root", root]) == EXIT_SUCCESS

    def test_verify_wrong_root(self, tmp_path, capsys):
        _, out = _prove(tmp_path, "--count", "4")
        capsys.readouterr()

        code = main(["verify", str(out), "--root", "0x" + "00" * 32, "--json", "--debug"])
        report = json.loads(capsys.readouterr().out)

        assert code == EXIT_VERIFICATION_FAILED
        assert report["valid"] is True
        assert report["root_ok"] is False
        assert {c["check_id"] for c in report["checks"]} == {"proof_valid", "root_match"}

    def test_verify_tampered_proof(self, tmp_path, capsys):
        _, out = _prove(tmp_path, "--count", "4")
        capsys.readouterr()
        data = json.loads(out.read_text())
        data["proof"]["leaf"] = "0x" + "11" * 32
        out.write_text(json.dumps(data))

        code = main(["verify", str(out), "--json"])
        report = json.loads(capsys.readouterr().out)

        assert code == EXIT_VERIFICATION_FAILED
        assert report["valid"] is False
        assert report["errors"]

    def test_verify_missing_file(self, tmp_path, capsys):
        code = main(["verify", str(tmp_path / "missing.json")])

        assert code == EXIT_RUNTIME_ERROR
        assert "not found" in capsys.readouterr().err

    def test_verify_bad_root_hex(self, tmp_path, capsys):
        _, out = _prove(tmp_path)

        assert main(["verify", str(out), "--root", "abc"]) == EXIT_RUNTIME_ERROR

    def test_verify_corrupt_proof(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({
            "schema_version": "v1",
            "scheme": "string-sha256",
            "height": 8,
            "index": 0,
            "proof": {"leaf": "zz"},
        }))

        assert main(["verify", str(path)]) == EXIT_RUNTIME_ERROR

    @pytest.mark.parametrize("field,value", [
        ("height", "tall"),
        ("index", 1.5),
        ("scheme", ["string-sha256"]),
    ])
    def test_verify_wrong_typed_field(self, tmp_path, capsys, field, value):
        """verify_cmd reports a runtime error itself, without relying on main()."""
        _, out = _prove(tmp_path, "--count", "4")
        capsys.readouterr()
        data = json.loads(out.read_text())
        data[field] = value
        out.write_text(json.dumps(data))

        args = argparse.Namespace(proof_path=str(out), debug=False, root=None, json=False)

        assert verify_cmd(args) == EXIT_RUNTIME_ERROR
        assert field in capsys.readouterr().err


class TestRunCommand:
    """Tests for `merkle run`."""

    def test_run_default(self, tmp_path, capsys):
        out = tmp_path / "run.json"
        code = main(["run", "--height", "16", "--out", str(out), "--json"])
        summary = json.loads(capsys.readouterr().out)

        assert code == EXIT_SUCCESS
        assert summary["ok"] is True
        assert summary["valid"] is True
        assert summary["saved_to"] == str(out)
        assert out.exists()

    def test_run_no_persist(self, tmp_path, capsys):
        code = main(["run", "--height", "8", "--no-persist", "--json"])
        summary = json.loads(capsys.readouterr().out)

        assert code == EXIT_SUCCESS
        assert "saved_to" not in summary

    def test_run_expect_invalid_fails(self, tmp_path, capsys):
        code = main(["run", "--height", "8", "--no-persist", "--expect-invalid"])

        assert code == EXIT_VERIFICATION_FAILED

    def test_run_bad_index(self, tmp_path, capsys):
        code = main(["run", "--height", "8", "--index", "500", "--no-persist"])

        assert code == EXIT_RUNTIME_ERROR

    def test_run_from_yaml(self, tmp_path, capsys):
        config = tmp_path / "merkle.yaml"
        config.write_text("tree:\n  height: 10\ndriver:\n  leaf_count: 3\n  proof_index: 2\n")

        code = main(["run", "--from-yaml", str(config), "--no-persist", "--json"])
        summary = json.loads(capsys.readouterr().out)

        assert code == EXIT_SUCCESS
        assert summary["height"] == 10
        assert summary["index"] == 2

    def test_run_debug_lists_checks(self, tmp_path, capsys):
        main(["run", "--height", "8", "--no-persist", "--json", "--debug"])
        summary = json.loads(capsys.readouterr().out)

        assert [c["check_id"] for c in summary["checks"]] == [
            "tree_verify",
            "proof_valid",
            "expected_result",
        ]


class TestConfigAndSchemes:
    """Tests for `merkle config` and `merkle schemes`."""

    def test_config_init_and_show(self, tmp_path, capsys):
        path = tmp_path / "merkle.json"

        assert main(["config", "--init", "--path", str(path)]) == EXIT_SUCCESS
        assert path.exists()
        capsys.readouterr()

        assert main(["config", "--show", "--path", str(path)]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["height"] == 128

    def test_config_init_refuses_overwrite(self, tmp_path, capsys):
        path = tmp_path / "merkle.json"
        path.write_text("{}")

        assert main(["config", "--init", "--path", str(path)]) == EXIT_RUNTIME_ERROR

    def test_config_file_sets_defaults(self, tmp_path, capsys):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"height": 9, "default_output_format": "json"}))

        code = main(["--config", str(path), "prove", "--out", str(tmp_path / "p.json")])
        summary = json.loads(capsys.readouterr().out)

        assert code == EXIT_SUCCESS
        assert summary["height"] == 9
        assert summary["witness_length"] == 8

    def test_schemes_json(self, capsys):
        assert main(["schemes", "--json"]) == EXIT_SUCCESS
        schemes = {s["scheme"]: s["leaf_type"] for s in json.loads(capsys.readouterr().out)}

        assert schemes["string-sha256"] == "HashableString"
        assert schemes["canonical-sha256"] == "CanonicalLeaf"
