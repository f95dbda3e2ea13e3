from __future__ import annotations

import pytest

from lms_client.errors import DataShapeError, UnknownRoleError
from lms_client.identity_access.decoders import decode_role, decode_token, decode_username
from lms_client.identity_access.domain import ROLE_HOME_PATHS, Role, home_path_for, parse_role


def test_home_path_mapping_is_total():
    assert set(ROLE_HOME_PATHS) == set(Role)
    assert home_path_for(Role.LEARNER) == "/learner"
    assert home_path_for(Role.AUTHOR) == "/author"
    assert home_path_for(Role.EXECUTIVE) == "/executive"


@pytest.mark.parametrize("value", ["ADMIN", "learner", "", None, 3])
def test_parse_role_rejects_values_outside_enum(value):
    with pytest.raises(UnknownRoleError) as exc:
        parse_role(value)
    assert exc.value.role == value


def test_decode_role_prefers_nested_shape():
    assert decode_role({"user": {"role": "AUTHOR"}, "role": "LEARNER"}) is Role.AUTHOR
    assert decode_role({"role": "EXECUTIVE"}) is Role.EXECUTIVE


@pytest.mark.parametrize("body", [{}, {"user": {}}, {"user": "AUTHOR"}, {"role": None}])
def test_decode_role_exhausted_shapes(body):
    with pytest.raises(DataShapeError) as exc:
        decode_role(body)
    assert exc.value.code == "role_missing"


def test_decode_role_rejects_non_object_body():
    with pytest.raises(DataShapeError) as exc:
        decode_role("LEARNER")
    assert exc.value.code == "details_invalid"


def test_decode_token_and_username():
    assert decode_token({"token": "abc"}) == "abc"
    with pytest.raises(DataShapeError):
        decode_token({"token": ""})
    assert decode_username({"user": {"username": "ann"}}) == "ann"
    assert decode_username({"username": "bo"}) == "bo"
    assert decode_username({}) is None
