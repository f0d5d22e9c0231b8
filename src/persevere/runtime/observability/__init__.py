"""Observability: logging configuration for the retry engine."""

from .logging import ROOT_LOGGER, JsonFormatter, configure_logging

__all__ = ["ROOT_LOGGER", "JsonFormatter", "configure_logging"]
