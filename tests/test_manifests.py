import logging

import pytest

from fuzzctl.commands import CustomCommand
from fuzzctl.errors import UsageError
from fuzzctl.manifests import (
    build_stages,
    find_kustomizations,
    parse_manifest_args,
    run_manifest_command,
)


@pytest.fixture
def env_root(tmp_path):
    root = tmp_path / "env"
    for name in ("prod", "dev"):
        folder = root / name
        folder.mkdir(parents=True)
        (folder / "kustomization.yaml").write_text("resources: []\n", encoding="utf-8")
    (root / "notes").mkdir()
    (root / "notes" / "README.md").write_text("x", encoding="utf-8")
    return root


@pytest.fixture
def pipeline(mocker):
    return mocker.patch("fuzzctl.manifests.run_pipeline", return_value=0)


def test_find_kustomizations_sorted(env_root, settings):
    found = find_kustomizations(env_root, settings.kustomization_markers)
    assert found == [env_root / "dev", env_root / "prod"]


def test_find_kustomizations_missing_root(tmp_path, settings):
    with pytest.raises(UsageError, match="not a directory"):
        find_kustomizations(tmp_path / "missing", settings.kustomization_markers)


def test_kb_is_plain_build(tools, env_root, pipeline):
    first = str(env_root / "dev")
    tools.selector.select.return_value = [first]

    assert run_manifest_command(tools, CustomCommand.KUSTOMIZE_BUILD, [str(env_root)]) == 0

    pipeline.assert_called_once_with([["kustomize", "build", first]])
    assert tools.selector.select.call_args[0][0] == [first, str(env_root / "prod")]


def test_kav_injects_secrets_then_applies(tools, env_root, pipeline, caplog):
    caplog.set_level(logging.INFO)
    first = str(env_root / "dev")
    tools.selector.select.return_value = [first]

    run_manifest_command(tools, CustomCommand.KUSTOMIZE_APPLY_SECRETS, [str(env_root)])

    pipeline.assert_called_once_with(
        [
            ["kustomize", "build", first],
            ["vals", "eval", "-f", "-"],
            ["kubectl", "apply", "-f", "-"],
        ]
    )
    assert "| vals eval -f - | kubectl apply -f -" in caplog.text


def test_only_first_of_several_folders_is_used(tools, env_root, pipeline):
    tools.selector.select.return_value = [str(env_root / "prod"), str(env_root / "dev")]
    run_manifest_command(tools, CustomCommand.KUSTOMIZE_DELETE, [str(env_root)])
    pipeline.assert_called_once_with(
        [["kustomize", "build", str(env_root / "prod")], ["kubectl", "delete", "-f", "-"]]
    )


def test_pipeline_status_is_returned(tools, env_root, pipeline):
    pipeline.return_value = 1
    tools.selector.select.return_value = [str(env_root / "dev")]
    assert run_manifest_command(tools, CustomCommand.KUSTOMIZE_APPLY, [str(env_root)]) == 1


def test_no_kustomization_found(tools, tmp_path, pipeline):
    with pytest.raises(UsageError, match="No kustomization"):
        run_manifest_command(tools, CustomCommand.KUSTOMIZE_BUILD, [str(tmp_path)])
    tools.selector.select.assert_not_called()


def test_nothing_selected(tools, env_root, pipeline):
    tools.selector.select.return_value = []
    with pytest.raises(UsageError, match="No kustomization folder selected"):
        run_manifest_command(tools, CustomCommand.KUSTOMIZE_APPLY, [str(env_root)])
    pipeline.assert_not_called()


def test_extra_args_go_to_last_kubectl_stage(tools):
    stages = build_stages(
        tools, CustomCommand.KUSTOMIZE_APPLY, "env/dev", ["--server-side"]
    )
    assert stages[-1] == ["kubectl", "apply", "-f", "-", "--server-side"]

    stages = build_stages(tools, CustomCommand.KUSTOMIZE_BUILD_SECRETS, "env/dev", ["--enable-helm"])
    assert stages[0] == ["kustomize", "build", "env/dev", "--enable-helm"]


def test_parse_manifest_args():
    root, extra = parse_manifest_args([])
    assert isinstance(parse_manifest_args([]), tuple)
    assert str(root) == "." and extra == []
    root, extra = parse_manifest_args(["./env", "--", "--prune"])
    assert str(root) == "env" and extra == ["--prune"]
    with pytest.raises(UsageError):
        parse_manifest_args(["a", "b"])
