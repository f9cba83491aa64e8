"""Run the test with the following command:
    pytest tests/runway_tools/core/test_errors.py
"""

import httpx
import pytest
import runwayml

from runway_tools.core.errors import ErrorKind, classify_vendor_error, error_status_code


class StatusError(Exception):
    def __init__(self, message, status_code=None, task_details=None):
        super().__init__(message)
        if status_code is not None:
            self.status_code = status_code
        if task_details is not None:
            self.task_details = task_details


def api_error(error_class, status_code, message):
    request = httpx.Request("GET", "https://api.dev.runwayml.com/v1/tasks/abc")
    response = httpx.Response(status_code, request=request)
    return error_class(message, response=response, body=None)


class TestClassifyVendorError:
    @pytest.mark.parametrize(
        "exc, expected",
        [
            (StatusError("Task failed", task_details={"id": "abc"}), ErrorKind.TASK_FAILED),
            (StatusError("Task failed", status_code=404, task_details={"id": "abc"}), ErrorKind.TASK_FAILED),
            (StatusError("Not found", status_code=404), ErrorKind.NOT_FOUND),
            (StatusError("Task cannot be canceled", status_code=404), ErrorKind.NOT_FOUND),
            (StatusError("Task cannot be canceled", status_code=400), ErrorKind.NOT_CANCELABLE),
            (StatusError("Task cannot be cancelled", status_code=400), ErrorKind.NOT_CANCELABLE),
            (StatusError("Invalid ratio", status_code=400), ErrorKind.GENERIC),
            (StatusError("Task cannot be canceled"), ErrorKind.GENERIC),
            (ConnectionError("connection reset"), ErrorKind.GENERIC),
        ],
    )
    def test_classification_order(self, exc, expected):
        assert classify_vendor_error(exc) == expected

    def test_sdk_not_found_error(self):
        exc = api_error(runwayml.NotFoundError, 404, "Task not found")
        assert error_status_code(exc) == 404
        assert classify_vendor_error(exc) == ErrorKind.NOT_FOUND

    def test_sdk_bad_request_error(self):
        exc = api_error(runwayml.BadRequestError, 400, "Task cannot be canceled")
        assert classify_vendor_error(exc) == ErrorKind.NOT_CANCELABLE

    def test_status_attribute_is_used(self):
        exc = Exception("missing")
        exc.status = 404
        assert error_status_code(exc) == 404

    def test_boolean_status_is_ignored(self):
        exc = Exception("odd")
        exc.status = True
        assert error_status_code(exc) is None
