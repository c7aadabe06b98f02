# src/relay/orchestrator.py
import enum
import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple, Union

from src.api.schemas import JobBoardPayload
from src.monitoring.metrics import SUBMISSIONS
from src.relay.ats_client import AtsBackend, extract_contact_id
from src.relay.transformers import create_application_payload, transform_input_to_contact

logger = logging.getLogger("relay.orchestrator")

SUCCESS_MESSAGE = "Application submitted successfully"
FAILURE_MESSAGE = "Failed to submit application"


class SubmissionState(str, enum.Enum):
    RECEIVED = "received"
    CONTACT_REQUESTED = "contact_requested"
    CONTACT_CREATED = "contact_created"
    APPLICATION_REQUESTED = "application_requested"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class SubmissionResult:
    state: SubmissionState
    failed_at: Optional[SubmissionState] = None
    contact_id: Optional[str] = None
    data: Optional[Any] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.state is SubmissionState.COMPLETED

    def to_response(self) -> Tuple[int, dict]:
        if self.ok:
            return 200, {"message": SUCCESS_MESSAGE, "data": self.data}
        return 500, {"message": FAILURE_MESSAGE, "error": self.error}


def _record(state: SubmissionState):
    try:
        SUBMISSIONS.labels(state=state.value).inc()
    except Exception:
        pass


async def submit_application(
    payload: Union[JobBoardPayload, bytes, str], backend: AtsBackend
) -> SubmissionResult:
    """
    Executa a sequência contato -> aplicação, estritamente em ordem.
      - a aplicação só é montada depois que o contato devolve um id
      - corpo bruto (bytes/str) é validado aqui; JSON inválido também vira FAILED
      - qualquer falha vira FAILED com a mensagem do erro
      - não há compensação: um contato criado antes de uma falha na
        aplicação fica órfão no ATS
    """
    state = SubmissionState.RECEIVED
    contact_id = None
    try:
        if not isinstance(payload, JobBoardPayload):
            payload = JobBoardPayload.model_validate_json(payload)
        contact = transform_input_to_contact(payload)

        state = SubmissionState.CONTACT_REQUESTED
        contact_resp = await backend.create_contact(contact)

        state = SubmissionState.CONTACT_CREATED
        contact_id = extract_contact_id(contact_resp)
        logger.info("contact created for job %s", payload.jobId)
        application = create_application_payload(payload.jobId, contact_id)

        state = SubmissionState.APPLICATION_REQUESTED
        app_resp = await backend.create_application(application)
    except Exception as exc:
        detail = str(exc) or type(exc).__name__
        logger.error("Error: %s (state=%s)", detail, state.value)
        _record(SubmissionState.FAILED)
        return SubmissionResult(
            state=SubmissionState.FAILED,
            failed_at=state,
            contact_id=contact_id,
            error=detail,
        )

    logger.info("application submitted for job %s", payload.jobId)
    _record(SubmissionState.COMPLETED)
    return SubmissionResult(
        state=SubmissionState.COMPLETED,
        contact_id=contact_id,
        data=app_resp.data,
    )
