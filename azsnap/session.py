import logging

from azsnap.errors import AzCommandError, SessionError


def check_session(service):
    """Make sure an authenticated session exists and still works."""
    account = service.get_current_session()
    if not account:
        logging.error("No active Azure session found")
        raise SessionError("No active Azure session found. Please run 'az login' and try again.")

    subscription_id = account.get("id")
    try:
        service.get_subscription(subscription_id)
    except AzCommandError as e:
        logging.error(f"Subscription check failed for {subscription_id}: {e}")
        raise SessionError(f"Azure authentication has expired or is invalid: {e}. Please run 'az login' again.")

    logging.info(f"Using subscription: {account.get('name', subscription_id)} ({subscription_id})")
    return account
