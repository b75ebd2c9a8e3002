from __future__ import annotations

from rich.console import Console

from wslprovision.logger import ProvisionLogger


def _logger(tmp_path, verbose: bool = False) -> ProvisionLogger:
    console = Console(record=True, width=120)
    return ProvisionLogger("Ubuntu", "up", verbose=verbose, log_dir=tmp_path, rich_console=console)


def test_log_file_layout(tmp_path) -> None:
    with _logger(tmp_path) as logger:
        path = logger.log_path

    assert path.parent.parent == tmp_path / "Ubuntu"
    assert path.name.endswith("_up.log")
    content = path.read_text(encoding="utf-8")
    assert "Distro: Ubuntu" in content
    assert "Status: SUCCESS" in content


def test_report_levels_reach_file_and_console(tmp_path) -> None:
    logger = _logger(tmp_path)

    logger.report("STEP", "[1/2] Install distro Ubuntu")
    logger.report("SUCCESS", "Applied")
    logger.report("WARNING", "State could not be determined")
    logger.report("DEBUG", "probe detail")
    logger.close()

    content = logger.log_path.read_text(encoding="utf-8")
    assert "[INFO] Step: [1/2] Install distro Ubuntu" in content
    assert "[INFO] Applied" in content
    assert "[WARNING] State could not be determined" in content
    assert "[DEBUG] probe detail" in content
    shown = logger.console.export_text()
    assert "Install distro Ubuntu" in shown
    assert "probe detail" not in shown


def test_errors_mark_the_run_failed(tmp_path) -> None:
    logger = _logger(tmp_path)

    logger.report("ERROR", "Create account failed: exit 1")
    logger.close()

    content = logger.log_path.read_text(encoding="utf-8")
    assert "ERROR OCCURRED" in content
    assert "Status: FAILED" in content


def test_command_output_is_stripped_of_ansi(tmp_path) -> None:
    logger = _logger(tmp_path)

    logger.log_output("\x1b[32mok\x1b[0m\nsecond", "stdout")
    logger.close()

    content = logger.log_path.read_text(encoding="utf-8")
    assert "  [stdout] ok\n" in content
    assert "  [stdout] second\n" in content
    assert "\x1b" not in content
