import os
import logging


class BaseConfig:
    LOG_LEVEL = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)

    # Whether to run the in-process sampler thread (never started while TESTING)
    SAMPLER_ENABLED = os.getenv("SAMPLER_ENABLED", "true").lower() == "true"
    # Seconds slept between the end of one sampling cycle and the start of the next
    SAMPLE_INTERVAL = float(os.getenv("SAMPLE_INTERVAL", "60"))
    # Retained history; 1440 samples is 24h at one-minute resolution
    MAX_SNAPSHOTS = int(os.getenv("MAX_SNAPSHOTS", "1440"))

    HOST = os.getenv("HOST", "0.0.0.0")
    PORT = int(os.getenv("PORT", "5001"))


class DevConfig(BaseConfig):
    DEBUG = True
    SAMPLE_INTERVAL = 5.0


class TestConfig(BaseConfig):
    TESTING = True
    DEBUG = False
    SAMPLER_ENABLED = False


class ProdConfig(BaseConfig):
    DEBUG = False


Config = BaseConfig
