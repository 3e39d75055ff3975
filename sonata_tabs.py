"""Tab assertions for SonataAdminBundle pages.

Every helper takes the tabs container: an element holding both the ``nav-tabs``
list of tab labels and the ``div`` with the tab panes that follows it.
"""

import logging

import sonata_dom


def tab_labels_container_xpath():
    return f"ul[{sonata_dom.has_class(sonata_dom.selector('tab_labels_class'))}]"


def tab_label_xpath():
    return f"{tab_labels_container_xpath()}/li//a[normalize-space()=$label]"


def tab_pane_xpath():
    pane_class = sonata_dom.has_class(sonata_dom.selector("tab_pane_class"))
    return (
        f"{tab_labels_container_xpath()}/following-sibling::div"
        f"/descendant-or-self::div[{pane_class} and @id=$pane_id]"
    )


def find_tab_labels(tab_label, tabs_container):
    return sonata_dom.xpath(tabs_container, tab_label_xpath(), label=tab_label)


def find_tab_panes(tab_label, tabs_container):
    """Return the panes the tab label's ``href`` points to; empty when the label is missing."""
    labels = find_tab_labels(tab_label, tabs_container)
    if not labels:
        return []

    href = labels[0].get("href") or ""
    pane_id = href.lstrip("#")
    logging.debug(f'Tab "{tab_label}" points to pane "{pane_id}"')
    return sonata_dom.xpath(tabs_container, tab_pane_xpath(), pane_id=pane_id)


def assert_tab_exists(tab_label, tabs_container):
    assert_tab_label_exists(tab_label, tabs_container)
    assert_tab_pane_exists(tab_label, tabs_container)


def assert_tab_not_exists(tab_label, tabs_container):
    assert_tab_label_not_exists(tab_label, tabs_container)


def assert_tab_label_exists(tab_label, tabs_container):
    sonata_dom.assert_count(
        1,
        find_tab_labels(tab_label, tabs_container),
        f'Tab with title "{tab_label}" not found',
    )


def assert_tab_label_not_exists(tab_label, tabs_container):
    sonata_dom.assert_count(
        0,
        find_tab_labels(tab_label, tabs_container),
        f'Tab with title "{tab_label}" found',
    )


def assert_tab_pane_exists(tab_label, tabs_container):
    sonata_dom.assert_true(
        find_tab_labels(tab_label, tabs_container),
        f'Tab with title "{tab_label}" not found',
    )
    sonata_dom.assert_count(
        1,
        find_tab_panes(tab_label, tabs_container),
        f'Pane for tab with title "{tab_label}" not found',
    )
