"""Tests for object key construction, the ownership guard and upload validation"""
import re

import pytest

from prepup.app.core.exceptions import OwnershipError, ValidationError
from prepup.app.services.file_keys import (
    authorize_key,
    build_resume_key,
    is_owned_key,
    sanitize_filename,
    strip_extension,
    user_prefix,
    validate_upload,
)


@pytest.mark.parametrize(
    "filename,expected",
    [
        ("Backend Engineer.pdf", "Backend_Engineer.pdf"),
        ("cv.final.docx", "cv_final.docx"),
        ("???", "resume.pdf"),
        ("résumé (final).docx", "r_sum_final.docx"),
        (".bashrc", "bashrc.pdf"),
        ("__a__b__.pdf", "a_b.pdf"),
        ('cv.p"df', "cv_p_df.pdf"),
        ("a.b/c", "a_b_c.pdf"),
    ],
)
def test_sanitize_filename(filename, expected):
    assert sanitize_filename(filename) == expected


def test_build_resume_key_format():
    assert build_resume_key("user_abc", "Backend Engineer.pdf", timestamp_ms=1700000000000) == (
        "resumes/user_abc/1700000000000-Backend_Engineer.pdf"
    )


def test_build_resume_key_uses_current_time():
    key = build_resume_key("user_abc", "cv.pdf")
    assert re.fullmatch(r"resumes/user_abc/\d{13}-cv\.pdf", key)


def test_is_owned_key():
    assert is_owned_key("user_abc", "resumes/user_abc/1-cv.pdf")
    assert not is_owned_key("user_abc", "resumes/user_xyz/1-cv.pdf")
    # prefix must end at a path boundary
    assert not is_owned_key("user_abc", "resumes/user_abc2/1-cv.pdf")
    assert not is_owned_key("user_abc", "resumes/user_abc/../user_xyz/1-cv.pdf")
    assert not is_owned_key("", "resumes//1-cv.pdf")


def test_authorize_key_raises_with_detail():
    assert authorize_key("user_abc", "resumes/user_abc/1-cv.pdf") == "resumes/user_abc/1-cv.pdf"
    with pytest.raises(OwnershipError) as exc:
        authorize_key("user_abc", "resumes/user_xyz/1-cv.pdf", "Invalid file key")
    assert exc.value.status_code == 403
    assert exc.value.detail == "Invalid file key"


def test_validate_upload_size_limit():
    validate_upload("application/pdf", 5 * 1024 * 1024)
    with pytest.raises(ValidationError) as exc:
        validate_upload("application/pdf", 5 * 1024 * 1024 + 1)
    assert exc.value.detail == "File size exceeds maximum limit of 5MB"


def test_validate_upload_mime_allow_list():
    validate_upload("application/msword", 10)
    validate_upload("application/vnd.openxmlformats-officedocument.wordprocessingml.document", 10)
    with pytest.raises(ValidationError) as exc:
        validate_upload("text/plain", 10)
    assert exc.value.detail == "Invalid file type. Only PDF, DOC, and DOCX files are allowed."
    with pytest.raises(ValidationError):
        validate_upload(None, 10)


def test_strip_extension():
    assert strip_extension("cv.final.pdf") == "cv.final"
    assert strip_extension("README") == "README"
    assert strip_extension(".hidden") == ".hidden"


def test_user_id_with_slash_owns_nothing():
    assert not is_owned_key("user_abc/x", "resumes/user_abc/x/1-cv.pdf")
    with pytest.raises(OwnershipError):
        user_prefix("user_abc/x")
    with pytest.raises(OwnershipError):
        build_resume_key("user_abc/x", "cv.pdf")
