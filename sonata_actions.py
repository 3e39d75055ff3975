"""Assertions for the "Actions" buttons and the batch actions of SonataAdminBundle list pages."""

import sonata_dom


def action_button_xpath():
    action_class = sonata_dom.has_class(sonata_dom.selector("action_element_class"))
    return f"a[{action_class} and normalize-space()=$title]"


def list_batch_action_button_xpath():
    return "select[@name=$select_name]/option[normalize-space()=$title]"


def find_action_buttons(action_title, page):
    return sonata_dom.xpath(page, action_button_xpath(), title=action_title)


def find_list_batch_action_buttons(action_title, page):
    return sonata_dom.xpath(
        page,
        list_batch_action_button_xpath(),
        title=action_title,
        select_name=sonata_dom.selector("batch_action_select_name"),
    )


def assert_action_button_exists(action_title, page):
    sonata_dom.assert_count(
        1,
        find_action_buttons(action_title, page),
        f'There is no action "{action_title}" on the page',
    )


def assert_action_button_not_exists(action_title, page):
    sonata_dom.assert_count(
        0,
        find_action_buttons(action_title, page),
        f'There is an action "{action_title}" on the page',
    )


def assert_list_batch_action_button_exists(action_title, page):
    sonata_dom.assert_count(
        1,
        find_list_batch_action_buttons(action_title, page),
        f'There is no batch action "{action_title}" on the page',
    )


def assert_list_batch_action_button_not_exists(action_title, page):
    sonata_dom.assert_count(
        0,
        find_list_batch_action_buttons(action_title, page),
        f'There is a batch action "{action_title}" on the page',
    )
