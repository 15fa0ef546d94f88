from noisychannels import find_noisy_channels, Recording
from noisychannels.utils.config import load_parameters
from noisychannels.utils.logging import configure_logger, logger
from pathlib import Path
import time
from datetime import datetime

import mne

def print_header(text):
    logger.log("HEADER", "=" * 80)
    logger.log("HEADER", text.center(80))
    logger.log("HEADER", "=" * 80)

def run_file(file_path, parameters):
    logger.info(f"\n📁 Checking file: {file_path.name}")

    start_time = time.time()
    try:
        raw = mne.io.read_raw(file_path, preload=True, verbose=mne_level)
        raw.filter(l_freq=1.0, h_freq=None, verbose=mne_level)
        report = find_noisy_channels(Recording.from_raw(raw), parameters)
        duration = time.time() - start_time
        logger.success(f"✅ {len(report.noisy_channels)} noisy channels in {duration:.2f} seconds")
        if report.channel_names is not None:
            logger.info(f"Noisy: {report.bad_channel_names()}")
        if not report.ransac_performed:
            logger.warning(f"ransac skipped: {report.ransac_message}")
        return report
    except Exception as e:
        duration = time.time() - start_time
        logger.error(f"❌ Failed after {duration:.2f} seconds")
        logger.error(f"Error: {str(e)}")
        return None

if __name__ == "__main__":
    # Setup
    OUTPUT_DIR = Path("noisychannels_output")
    CONFIG_PATH = Path("noisy_channels.yaml")

    # Configure logging
    mne_level = configure_logger(verbose="INFO", output_dir=OUTPUT_DIR)

    print_header(f"Noisy channel detection - {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}")

    parameters = load_parameters(CONFIG_PATH) if CONFIG_PATH.exists() else {}

    files = sorted(Path("data").glob("*.set")) + sorted(Path("data").glob("*.fif"))

    reports = {}
    for file_path in files:
        reports[file_path.name] = run_file(file_path, parameters)

    # Summary
    print_header("Summary")
    for name, report in reports.items():
        if report is None:
            logger.error(f"{name}: failed")
        else:
            logger.info(f"{name}: {report.noisy_channels}")
