import atexit
import logging
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger
from kindergarten import db
from kindergarten.errors import AppError

logger = logging.getLogger(__name__)

scheduler = None


def purge_expired_verification_codes(app):
    from kindergarten.services.auth import AuthService

    with app.app_context():
        try:
            count = AuthService(db.session).purge_expired_codes()
            logger.info(f"Verification code purge completed. Removed {count} codes.")
        except AppError as e:
            logger.error(f"Error in purge_expired_verification_codes: {e.message}")
        finally:
            db.session.remove()


def init_scheduler(app):
    global scheduler

    if scheduler is None:
        scheduler = BackgroundScheduler(daemon=True)
        interval = app.config.get('VERIFICATION_PURGE_INTERVAL_MINUTES', 15)

        scheduler.add_job(
            func=purge_expired_verification_codes,
            args=[app],
            trigger=IntervalTrigger(minutes=interval),
            id='verification_code_purge_job',
            name='Expired Verification Code Purge',
            replace_existing=True
        )

        scheduler.start()
        atexit.register(shutdown_scheduler)
        logger.info(f"Scheduler started, purging expired verification codes every {interval} minutes")

    return scheduler


def shutdown_scheduler():
    global scheduler

    if scheduler is not None:
        scheduler.shutdown()
        scheduler = None
        logger.info("Scheduler shut down successfully")
