# src/relay/transformers.py
import base64
import re
import time

from src.api.schemas import ApplicationPayload, ContactPayload, JobBoardPayload

# Assume numeração holandesa: "06..." -> "+316..."
COUNTRY_PREFIX = "+31"


def _split_name(name: str):
    # corta no primeiro bloco de espaços, sem strip: " Jan" -> ("", "Jan")
    first, *rest = re.split(r"\s+", name, maxsplit=1)
    last = " ".join(rest[0].split()) if rest else ""
    return first, last


def _binary_to_base64(raw: str) -> str:
    """Cada caractere vira um byte (8 bits baixos), como numa string "binary"."""
    data = bytes(ord(ch) & 0xFF for ch in raw)
    return base64.b64encode(data).decode("ascii")


def transform_input_to_contact(payload: JobBoardPayload) -> ContactPayload:
    first_name, last_name = _split_name(payload.name)
    # sem validação de formato: só descarta o primeiro dígito
    phone = f"{COUNTRY_PREFIX}{payload.phone[1:]}"

    return ContactPayload(
        firstName=first_name,
        lastName=last_name,
        email=payload.email,
        phone=phone,
        city=payload.city,
        motivation=payload.motivation,
        cv=_binary_to_base64(payload.cv),
    )


def create_application_payload(job_id: str, contact_id: str) -> ApplicationPayload:
    # microssegundos com resolução de milissegundo
    return ApplicationPayload(
        jobId=job_id,
        timestamp=int(time.time() * 1000) * 1000,
        contactId=contact_id,
    )
