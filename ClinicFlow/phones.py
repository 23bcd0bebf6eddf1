# ClinicFlow/phones.py
#
# Phone normalisation shared by the doctor and patient directories.
# ------------------------------------------------------------------

from __future__ import annotations

import logging
import re
from typing import Final

import phonenumbers
from django.conf import settings

logger: Final[logging.Logger] = logging.getLogger(__name__)


def normalize_phone(raw: str) -> str:
    """Strip separators and format as E.164 when phonenumbers can parse it.

    Numbers written without a country code are read in
    settings.CLINICFLOW_PHONE_REGION.
    """
    compact = re.sub(r"[\s\-().]", "", raw)
    try:
        parsed = phonenumbers.parse(compact, settings.CLINICFLOW_PHONE_REGION)
    except phonenumbers.NumberParseException:
        logger.warning("Could not normalise phone number %r; keeping it as typed.", raw)
        return compact
    if not phonenumbers.is_possible_number(parsed):
        return compact
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)
