import os

class Config:
    # Database - Required
    DATABASE_URL = os.environ.get("DATABASE_URL")

    # App settings - Required
    SECRET_KEY = os.environ.get("SECRET_KEY")
    SESSION_SECRET = os.environ.get("SESSION_SECRET")

    # Admin endpoints (catalog seeding)
    ADMIN_API_TOKEN = os.environ.get("ADMIN_API_TOKEN")

    # Caching backend - falls back to in-memory when unset
    REDIS_URL = os.environ.get("REDIS_URL")
    CATALOG_CACHE_TIMEOUT = int(os.environ.get("CATALOG_CACHE_TIMEOUT") or "3600")

    # Benchmark table (poor/elite pairs per event and cohort)
    # Defaults to the YAML file shipped next to the scoring engine
    BENCHMARKS_PATH = os.environ.get("BENCHMARKS_PATH") or os.path.join(
        os.path.dirname(os.path.abspath(__file__)), 'services', 'scoring', 'benchmarks.yml'
    )

    # Normalized score scale
    SCORE_MIN = 0
    SCORE_MAX = 100

    # Unit types where a smaller raw value is the better performance
    LOWER_IS_BETTER_UNIT_TYPES = ('time',)

    # Units accepted for time submissions, converted to seconds
    TIME_UNIT_SECONDS = {
        'seconds': 1,
        'minutes': 60,
    }
