"""Tests for component loggers and the JSON formatter."""

import json
import logging

import pytest

from util_logger import ComponentType, JSONFormatter, LoggerFactory, log_exceptions


@pytest.fixture()
def service_logger():
    return LoggerFactory.create_logger(ComponentType.SERVICE, "CallSiteCheck")


def test_record_points_at_caller(service_logger, caplog):
    with caplog.at_level(logging.INFO):
        service_logger.info("listing parcels")

    record = caplog.records[-1]
    assert record.module == "test_util_logger"
    assert record.funcName == "test_record_points_at_caller"


def test_custom_dimensions_merged(service_logger, caplog):
    with caplog.at_level(logging.INFO):
        service_logger.info("rows", extra={"custom_dimensions": {"row_count": 3}})

    assert caplog.records[-1].custom_dimensions == {
        "component_type": "service",
        "component_name": "CallSiteCheck",
        "row_count": 3,
    }


def test_json_output_names_caller(service_logger, caplog):
    with caplog.at_level(logging.INFO):
        service_logger.warning("slow query")

    payload = json.loads(JSONFormatter().format(caplog.records[-1]))
    assert payload["level"] == "WARNING"
    assert payload["message"] == "slow query"
    assert payload["function"] == "test_json_output_names_caller"
    assert payload["customDimensions"]["component_name"] == "CallSiteCheck"


def test_log_exceptions_reraises(service_logger, caplog):
    @log_exceptions(logger=service_logger)
    def explode():
        raise ValueError("bad input")

    with caplog.at_level(logging.ERROR), pytest.raises(ValueError):
        explode()

    assert caplog.records[-1].levelno == logging.ERROR
    assert caplog.records[-1].exc_info is not None
