from orderdesk.core.config import get_config_value
from orderdesk.core.gateway import GatewayError
from orderdesk.core.logging_service import LoggingService

BOOTSTRAP_FLAG = 'orderdesk_bootstrapped'


def create_orders_table(gateway):
    """Call the create-if-not-exists procedure; raises GatewayError on failure"""
    rpc_name = get_config_value('ORDERS_TABLE_SETUP_RPC', 'create_orders_table_if_not_exists')
    gateway.rpc(rpc_name)


def ensure_orders_table(gateway):
    """Make sure the orders table exists. Safe to call repeatedly; never raises."""
    try:
        create_orders_table(gateway)
    except GatewayError as e:
        LoggingService.error('setup', f"Failed to initialize orders table: {e.message}")
        return False
    except Exception as e:
        LoggingService.log_error_with_traceback('setup', e)
        return False

    LoggingService.info('setup', 'Orders table initialized successfully')
    return True


def run_startup_bootstrap(app, gateway):
    """Run the orders table bootstrap once for this app; failures are logged only"""
    if app.extensions.get(BOOTSTRAP_FLAG):
        return app.extensions[BOOTSTRAP_FLAG] == 'ok'

    with app.app_context():
        if not gateway.configured:
            LoggingService.warning('setup', 'Skipping orders table bootstrap: gateway not configured')
            app.extensions[BOOTSTRAP_FLAG] = 'skipped'
            return False

        ok = ensure_orders_table(gateway)

    app.extensions[BOOTSTRAP_FLAG] = 'ok' if ok else 'failed'
    return ok
