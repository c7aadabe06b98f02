from src.api.schemas import JobBoardPayload


def test_scalars_are_coerced_to_str():
    p = JobBoardPayload.model_validate({"jobid": 123, "phone": 612345678, "name": None})
    assert p.jobId == "123"
    assert p.phone == "612345678"
    assert p.name == ""

def test_missing_fields_default_to_empty():
    p = JobBoardPayload.model_validate_json(b"{}")
    assert p.jobId == ""
    assert p.cv == ""
    assert p.email == ""
