import os


def _optional_int(name):
    value = os.environ.get(name)
    return int(value) if value not in (None, '') else None


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    # Comma separated; '*' allows any origin
    CORS_ALLOWED_ORIGINS = os.environ.get('CORS_ALLOWED_ORIGINS', '*')
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    # Round pacing timers (seconds)
    START_DELAY_SEC = float(os.environ.get('START_DELAY_SEC', '0'))
    ROUND_DELAY_SEC = float(os.environ.get('ROUND_DELAY_SEC', '5'))
    FINALIZE_DELAY_SEC = float(os.environ.get('FINALIZE_DELAY_SEC', '3'))
    # How long a finished session stays readable before removal
    SESSION_RETENTION_SEC = float(os.environ.get('SESSION_RETENTION_SEC', '10'))
    # 'both' scores a tied comparison for both players, 'none' for nobody
    TIE_POLICY = os.environ.get('TIE_POLICY', 'both')
    # 'socketio' runs timers as background tasks; 'manual' waits for explicit advance
    SCHEDULER = os.environ.get('SCHEDULER', 'socketio')
    RANDOM_SEED = _optional_int('RANDOM_SEED')
