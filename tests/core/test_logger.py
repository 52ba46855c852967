from loguru import logger

from windsock.core.logger import climb_context, setup_logger


def test_file_sink_receives_structured_messages(tmp_path):
    log_file = tmp_path / "logs" / "windsock.log"
    setup_logger(level="DEBUG", log_file=str(log_file))
    try:
        logger.info("Built climb grid", days=8)
        with climb_context("Old La Honda"):
            logger.warning("Excluding climb")
        logger.info("Plain message")
    finally:
        logger.remove()
        setup_logger()

    lines = log_file.read_text(encoding="utf-8").splitlines()
    grid = next(line for line in lines if "Built climb grid" in line)
    excluded = next(line for line in lines if "Excluding climb" in line)
    plain = next(line for line in lines if "Plain message" in line)
    assert "'days': 8" in grid
    assert "'climb': 'Old La Honda'" in excluded
    assert plain.endswith("Plain message")
