"""API blueprints."""

import logging

from flask import Blueprint, current_app

from unplug.utils import server_error, service_unavailable
from unplug.utils.exceptions import (
    ConfigurationError,
    MeasurementUnavailable,
    StorageFailure,
)

logger = logging.getLogger(__name__)

api_bp = Blueprint("api", __name__)


def get_services():
    """The app's GachaServices container."""
    return current_app.extensions["gacha"]


@api_bp.errorhandler(ConfigurationError)
def handle_configuration_error(error):
    logger.error(f"Configuration error: {error}")
    return server_error(str(error), code=ConfigurationError.code)


@api_bp.errorhandler(StorageFailure)
def handle_storage_failure(error):
    logger.error(f"Storage failure: {error}")
    return service_unavailable(StorageFailure.code, str(error))


@api_bp.errorhandler(MeasurementUnavailable)
def handle_measurement_unavailable(error):
    logger.warning(f"Usage measurement unavailable: {error}")
    return service_unavailable(MeasurementUnavailable.code, str(error))


from unplug.api import (admin, auth, cards, gacha, missions,  # noqa: E402, F401
                        usage)
