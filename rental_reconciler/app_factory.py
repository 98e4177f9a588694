"""
This module provides a factory for creating and configuring the application's core components.
"""
from typing import Optional

from reservation_parser.config import PRIMARY_SOURCE
from reservation_parser.facade import ReconciliationFacade
from reservation_parser.services.device_classifier import DeviceClassifier
from reservation_parser.services.field_extractor import FieldExtractor
from reservation_parser.services.pair_scorer import PairScorer
from reservation_parser.services.reconciliation_service import ReconciliationService

from .logging_config import setup_logging


def initialize_app() -> None:
    """
    Initializes the application by setting up logging.
    """
    setup_logging()


def create_facade(primary_source: Optional[str] = None) -> ReconciliationFacade:
    """
    Initializes and returns the ReconciliationFacade with all its dependencies.
    """
    extractor = FieldExtractor(device_classifier=DeviceClassifier())
    reconciliation_service = ReconciliationService(
        extractor=extractor,
        scorer=PairScorer(),
        primary_source=primary_source or PRIMARY_SOURCE,
    )
    return ReconciliationFacade(reconciliation_service, extractor=extractor)
