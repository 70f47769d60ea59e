from datetime import datetime

import pytest

from autopackage.errors import ReleaseError
from autopackage.services.script_rewriter import ScriptRewriter

BUILD_TIME = datetime(2026, 3, 9, 14, 30)

TEMPLATE = (
    "; version.iss\r\n"
    '#define MyAppVersion "1.0.0.0"\r\n'
    '#define MyAppBuildNo "(Build 01/01/20)"\r\n'
    '#define OutputVersion "100"\r\n'
    '#define MyAppName "Demo"\r\n'
)


def test_rewrites_all_three_fields():
    result = ScriptRewriter().rewrite(TEMPLATE, "1.4.4.13", BUILD_TIME)

    assert '#define MyAppVersion "1.4.4.13"\r\n' in result
    assert '#define MyAppBuildNo "(Build 03/09/26)"\r\n' in result
    assert '#define OutputVersion "144"\r\n' in result
    assert '#define MyAppName "Demo"\r\n' in result
    assert result.startswith("; version.iss\r\n")


def test_document_without_fields_is_unchanged():
    text = '[Setup]\nAppName=Demo\n#define Other "1.0"\n'

    assert ScriptRewriter().rewrite(text, "2.0.0.7", BUILD_TIME) == text


def test_fields_are_replaced_independently():
    text = 'MyAppVersion "0.9"\nsomething else\n'

    result = ScriptRewriter().rewrite(text, "2.0.0.7", BUILD_TIME)

    assert result == 'MyAppVersion "2.0.0.7"\nsomething else\n'


def test_rewrite_is_idempotent():
    rewriter = ScriptRewriter()

    once = rewriter.rewrite(TEMPLATE, "1.4.4.13", BUILD_TIME)

    assert rewriter.rewrite(once, "1.4.4.13", BUILD_TIME) == once


def test_rewrite_does_not_modify_input():
    text = str(TEMPLATE)

    ScriptRewriter().rewrite(text, "1.4.4.13", BUILD_TIME)

    assert text == TEMPLATE


def test_rewrite_rejects_version_without_dot():
    with pytest.raises(ReleaseError):
        ScriptRewriter().rewrite(TEMPLATE, "7", BUILD_TIME)


def test_build_number_format():
    assert ScriptRewriter.build_number(datetime(2020, 1, 1)) == "(Build 01/01/20)"


def test_changed_fields_reports_updated_labels():
    rewriter = ScriptRewriter()
    text = 'MyAppVersion "1.4.4.13"\nOutputVersion "100"\n'

    result = rewriter.rewrite(text, "1.4.4.13", BUILD_TIME)

    assert rewriter.changed_fields(text, result) == ["OutputVersion"]
