# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Wire model of the Opsgenie error body.

Responses with a status of 300 or above carry a JSON document of the form::

    {"message": "...", "took": 0.5, "requestId": "...", "errors": {"field": "..."}}
"""

import json
import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError

logger = logging.getLogger(__name__)


class ApiErrorBody(BaseModel):
    """
    Decoded error body.

    Every field is optional. Unknown keys are ignored so new server-side
    fields never break decoding.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    message: str = ""
    took: float = 0.0
    request_id: str = Field(default="", alias="requestId")
    errors: dict[str, str] | None = None

    @classmethod
    def parse_lenient(cls, body: bytes) -> "ApiErrorBody":
        """
        Decode an error body without ever failing.

        The whole document is validated first. When that fails, each field is
        validated on its own so one malformed value does not discard the
        others. A body that is not a JSON object decodes to an empty model.

        Args:
            body: Raw response body

        Returns:
            The decoded body; fields that could not be decoded stay empty.
        """
        if not body:
            return cls()
        try:
            return cls.model_validate_json(body)
        except ValidationError:
            pass

        try:
            document = json.loads(body)
        except ValueError:
            logger.debug("Error body is not JSON; leaving decoded fields empty")
            return cls()
        if not isinstance(document, dict):
            return cls()

        decoded = cls()
        for key, value in document.items():
            try:
                partial = cls.model_validate({key: value})
            except ValidationError:
                continue
            for name in partial.model_fields_set:
                setattr(decoded, name, getattr(partial, name))
        return decoded


__all__ = ["ApiErrorBody"]
