import os
from dotenv import load_dotenv

load_dotenv(override=True)


def _env_flag(name, default):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {'1', 'true', 'yes', 'y', 'on'}


def _env_list(name):
    return [part.strip() for part in os.getenv(name, '').split(',') if part.strip()]


class Config:
    """
    Base configuration for OrderDesk.
    Credentials for the managed database must come from the environment.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY') or os.getenv('SECRET_KEY')

    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))
    LOG_DB = os.getenv('LOG_DB', os.path.join(DB_DIR, 'app_logs.db'))

    # Supabase (service-role credentials, server side only)
    SUPABASE_URL = os.getenv('SUPABASE_URL')
    SUPABASE_SERVICE_ROLE_KEY = os.getenv('SUPABASE_SERVICE_ROLE_KEY')
    SUPABASE_ANON_KEY = os.getenv('SUPABASE_ANON_KEY')
    SUPABASE_TIMEOUT = int(os.getenv('SUPABASE_TIMEOUT', '15'))

    # Orders
    ORDERS_TABLE = os.getenv('ORDERS_TABLE', 'orders')
    ORDERS_TABLE_SETUP_RPC = os.getenv('ORDERS_TABLE_SETUP_RPC', 'create_orders_table_if_not_exists')
    ORDERS_STRICT_STATUS = _env_flag('ORDERS_STRICT_STATUS', True)
    ORDERS_REFRESH_SECONDS = int(os.getenv('ORDERS_REFRESH_SECONDS', '30'))
    ORDERS_ENRICH_WORKERS = int(os.getenv('ORDERS_ENRICH_WORKERS', '8'))

    # Run the orders table bootstrap when the extension is initialised
    ORDERDESK_BOOTSTRAP_ON_STARTUP = _env_flag('ORDERDESK_BOOTSTRAP_ON_STARTUP', True)

    # Staff allowed into the admin panel
    ADMIN_EMAILS = _env_list('ADMIN_EMAILS')

    # Storefront origins allowed to create orders
    CORS_ORIGINS = _env_list('CORS_ORIGINS')

    # Port for local server
    port = int(os.getenv('PORT', '5000'))


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)


def get_config_flag(key, default=False):
    val = get_config_value(key, default)
    if isinstance(val, str):
        return val.strip().lower() in {'1', 'true', 'yes', 'y', 'on'}
    return bool(val)


def get_config_list(key):
    val = get_config_value(key, [])
    if isinstance(val, str):
        return [part.strip() for part in val.split(',') if part.strip()]
    return list(val or [])
