import logging

logger = logging.getLogger("gce.metadata")

# Ensure logs are visible by default if not configured elsewhere
# Users can override this by configuring the "gce.metadata" logger.
if not logger.handlers:
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(name)s: %(message)s")
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
