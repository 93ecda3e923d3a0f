# logger_setup.py

import logging
import os

LOGGER_NAME = "simple_space"


def setup_logging(config: dict, runs_dir='runs'):
    """
    Configures the "simple_space" logger for one run of the sandbox.

    The logger writes to runs/<run_id>/<file> and, unless the config turns it
    off, to the console. It never propagates to the root logger, which keeps
    pygame and Numba output out of the run log. Calling this again replaces
    the previous handlers.

    Data Contract:
    - Inputs:
        - config (dict) - The loaded config.json. Requires 'run_id' and a
          'logging' section with 'level' and 'format'; 'file' (default
          'simulation.log') and 'console' (default true) are optional. The
          'simulation' section, if present, is recorded in the log header.
        - runs_dir (str) - Directory under which the run's log folder is created.
    - Outputs: The configured logging.Logger.
    - Side Effects: Creates the run's log directory.
    """
    run_id = config['run_id']
    log_config = config['logging']

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_config['level'])
    logger.propagate = False

    log_dir = os.path.join(runs_dir, run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, log_config.get('file', 'simulation.log'))

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)

    formatter = logging.Formatter(log_config['format'])
    handlers = [logging.FileHandler(log_file)]
    if log_config.get('console', True):
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging initialized. Run ID: {run_id}. Log file: {log_file}")
    sim_config = config.get('simulation')
    if sim_config:
        settings = ", ".join(f"{key}={value}" for key, value in sorted(sim_config.items()))
        logger.info(f"Simulation settings: {settings}")
    return logger
