from __future__ import annotations

from django.test import SimpleTestCase
from rest_framework.exceptions import NotFound as DrfNotFound
from rest_framework.exceptions import ValidationError as DrfValidationError

from config.domain_exceptions import ConfigurationError, DomainError, NotFoundError
from config.exception_handler import custom_exception_handler


class _DummyView:
    pass


class ExceptionHandlerTests(SimpleTestCase):
    def _handle(self, exc: Exception):
        response = custom_exception_handler(exc, {"view": _DummyView()})
        self.assertIsNotNone(response)
        return response

    def test_drf_validation_error_includes_envelope(self):
        response = self._handle(DrfValidationError({"name": ["This field is required."]}))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["status"], "validation_error")
        self.assertIn("name", response.data["error"]["details"])

    def test_drf_not_found_keeps_detail_message(self):
        response = self._handle(DrfNotFound("Nope."))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["status"], "not_found")
        self.assertEqual(response.data["error"]["message"], "Nope.")

    def test_not_found_error_maps_to_404(self):
        response = self._handle(NotFoundError("Job 'x' is not registered."))
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.data["error"]["status"], "not_found")
        self.assertEqual(response.data["error"]["message"], "Job 'x' is not registered.")

    def test_configuration_error_maps_to_503(self):
        with self.assertLogs("config.exception_handler", level="WARNING"):
            response = self._handle(ConfigurationError("DAEMON_DIR is not usable"))
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.data["error"]["status"], "service_unavailable")

    def test_generic_domain_error_maps_to_400(self):
        response = self._handle(DomainError("bad input"))
        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["error"]["status"], "bad_request")

    def test_unknown_exception_is_left_to_django(self):
        self.assertIsNone(custom_exception_handler(RuntimeError("boom"), {"view": _DummyView()}))
