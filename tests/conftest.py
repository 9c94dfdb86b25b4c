import sys
import json
from pathlib import Path
from typing import Any, Callable, Optional

from click.testing import CliRunner
import pytest


def _ensure_repo_on_path() -> None:
    repo_root = Path(__file__).resolve().parent.parent
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))


_ensure_repo_on_path()

from instruction_scope.instructions.models import InstructionDocument, InstructionMetadata  # noqa: E402
from instruction_scope.matching.glob import split_pattern_list  # noqa: E402


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / ".config"))
    monkeypatch.setattr(Path, "home", lambda: tmp_path)


@pytest.fixture
def write_json():
    def _write(path: Path, payload: Any) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(payload), encoding="utf-8")

    return _write


@pytest.fixture
def config_root(tmp_path: Path) -> Path:
    return tmp_path / ".config" / "instruction-scope"


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    path = tmp_path / "workspace"
    path.mkdir()
    return path


@pytest.fixture
def instructions_root(workspace: Path) -> Path:
    path = workspace / ".github" / "instructions"
    path.mkdir(parents=True)
    return path


@pytest.fixture
def write_instruction(instructions_root: Path) -> Callable[..., Path]:
    def _write(
        relative: str,
        apply_to: Optional[str] = None,
        body: str = "Body.\n",
        description: Optional[str] = None,
    ) -> Path:
        lines = ["---"]
        if description is not None:
            lines.append(f"description: {json.dumps(description)}")
        if apply_to is not None:
            lines.append(f"applyTo: {json.dumps(apply_to)}")
        lines.append("---")
        path = instructions_root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(lines) + "\n" + body, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def make_document() -> Callable[..., InstructionDocument]:
    def _make(document_id: str, apply_to: str, body: str = "", description: str = "") -> InstructionDocument:
        return InstructionDocument(
            id=document_id,
            source_path=Path(f"/fake/{document_id}.instructions.md"),
            metadata=InstructionMetadata(
                apply_to=split_pattern_list(apply_to),
                description=description,
            ),
            body=body or f"{document_id} guidance.\n",
        )

    return _make


@pytest.fixture
def cli_runner(tmp_path: Path) -> CliRunner:
    class HomeCliRunner(CliRunner):
        def invoke(self, cli: Any, args: Any = None, **kwargs: Any):  # type: ignore[override]
            env = dict(kwargs.pop("env", {}) or {})
            env.setdefault("HOME", str(tmp_path))
            env.setdefault("XDG_CONFIG_HOME", str(tmp_path / ".config"))
            kwargs["env"] = env
            return super().invoke(cli, args=args, **kwargs)

    return HomeCliRunner()


@pytest.fixture(autouse=True)
def reset_package_logger():
    import logging

    yield
    logger = logging.getLogger("instruction_scope")
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
