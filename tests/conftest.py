import sys
from pathlib import Path
from typing import Callable, List

import pytest

CommandFactory = Callable[..., List[str]]


@pytest.fixture
def fake_command(tmp_path: Path) -> CommandFactory:
    """Build an argument list for a script that prints ``stdout`` and exits."""
    counter = iter(range(1000))

    def factory(stdout: str = "", returncode: int = 0, stderr: str = "") -> List[str]:
        script = tmp_path / f"fake_cmd_{next(counter)}.py"
        script.write_text(
            f"""import sys
sys.stdout.write({stdout!r})
sys.stdout.flush()
sys.stderr.write({stderr!r})
sys.stderr.flush()
sys.exit({returncode})
""",
            encoding="utf-8",
        )
        return [sys.executable, str(script)]

    return factory
