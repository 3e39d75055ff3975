"""Flash message assertions for SonataAdminBundle pages."""

import re

import sonata_dom


def find_flash_success_messages(page):
    return sonata_dom.css(page, sonata_dom.selector("flash_success"))


def find_flash_error_messages(page):
    return sonata_dom.css(page, sonata_dom.selector("flash_error"))


def find_flash_warning_messages(page):
    return sonata_dom.css(page, sonata_dom.selector("flash_warning"))


def _assert_flash_message_matches(pattern, nodes, missing_message, mismatch_message):
    sonata_dom.assert_true(len(nodes) > 0, missing_message)

    matched = any(re.search(pattern, node.text_content()) for node in nodes)
    sonata_dom.assert_true(matched, mismatch_message)


def assert_flash_success_message_exists(message, page):
    """
    Check that a success flash message matches ``message``.

    Parameters:
        message (str): Regular expression searched in each message's text.
        page: The page as an lxml element or HTML.
    """
    _assert_flash_message_matches(
        message,
        find_flash_success_messages(page),
        "No success messages on the page!",
        f'Success flash messages do not contain text "{message}".',
    )


def assert_flash_error_message_exists(error, page):
    _assert_flash_message_matches(
        error,
        find_flash_error_messages(page),
        "No error messages on the page!",
        f'Error flash messages do not contain text "{error}".',
    )


def assert_flash_warning_message_exists(expected_message, page):
    _assert_flash_message_matches(
        expected_message,
        find_flash_warning_messages(page),
        "No warning messages on the page!",
        f'Warning flash messages do not contain text "{expected_message}".',
    )


def assert_flash_error_messages_count(count, page):
    sonata_dom.assert_equal(
        count,
        len(find_flash_error_messages(page)),
        "Unexpected number of error flash messages",
    )
