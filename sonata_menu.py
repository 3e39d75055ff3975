"""Sidebar menu assertions for SonataAdminBundle pages, plus menu hierarchy extraction."""

from collections.abc import Mapping
from dataclasses import dataclass
import argparse
import logging
import sys

import pandas as pd
import yaml

import sonata_dom


MENU_COLUMNS = ["Level", "Parent", "Label", "Kind", "Occurrence"]


class MalformedMenuError(ValueError):
    """A menu item has no label link, so the hierarchy cannot be read."""


@dataclass(frozen=True)
class MenuLeaf:
    label: str


@dataclass(frozen=True)
class MenuGroup:
    label: str
    children: tuple = ()

    def __post_init__(self):
        object.__setattr__(self, "children", tuple(self.children))


def menu_xpath():
    return sonata_dom.selector("menu")


def menu_item_xpath(variable="item"):
    return f"li//a[normalize-space()=${variable}]"


def menu_group_menu_xpath():
    group_class = sonata_dom.has_class(sonata_dom.selector("menu_group_class"))
    group_menu_class = sonata_dom.has_class(sonata_dom.selector("menu_group_menu_class"))
    return f"li[{group_class}]//a[normalize-space()=$group]/following-sibling::ul[{group_menu_class}]"


def menu_item_in_group_xpath():
    return f"{menu_xpath()}//{menu_group_menu_xpath()}//{menu_item_xpath()}"


def find_menus(page):
    return sonata_dom.xpath(page, menu_xpath())


def assert_menu_exists(page):
    sonata_dom.assert_count(1, find_menus(page), "Menu not found on the page")


def assert_menu_not_exists(page):
    sonata_dom.assert_count(0, find_menus(page), "Menu is present on the page")


def assert_menu_item_exists(page, menu_item):
    nodes = sonata_dom.xpath(page, f"{menu_xpath()}//{menu_item_xpath()}", item=menu_item)
    sonata_dom.assert_count(1, nodes, f'There is no "{menu_item}" item in the menu')


def assert_menu_item_not_exists(page, menu_item):
    nodes = sonata_dom.xpath(page, f"{menu_xpath()}//{menu_item_xpath()}", item=menu_item)
    sonata_dom.assert_count(0, nodes, f'There is a "{menu_item}" item in the menu')


def assert_menu_item_in_group_exists(page, menu_item, menu_group):
    nodes = sonata_dom.xpath(page, menu_item_in_group_xpath(), item=menu_item, group=menu_group)
    sonata_dom.assert_count(
        1,
        nodes,
        f'There is no "{menu_item}" item in the "{menu_group}" menu group',
    )


def assert_menu_item_in_group_not_exists(page, menu_item, menu_group):
    nodes = sonata_dom.xpath(page, menu_item_in_group_xpath(), item=menu_item, group=menu_group)
    sonata_dom.assert_count(
        0,
        nodes,
        f'There is a "{menu_item}" item in the "{menu_group}" menu group',
    )


def extract_menu_tree(menu_root, position=()):
    """
    Read the labels of a menu list and its nested lists.

    Parameters:
        menu_root: The ``ul`` element (or its HTML) whose direct ``li`` children are menu items.
        position (tuple): 1-based indexes of ``menu_root`` inside the outer menu, used in errors.

    Returns:
        tuple: MenuLeaf / MenuGroup nodes in document order. An item with an empty
        nested list is a MenuGroup without children.

    Raises:
        MalformedMenuError: An item has no direct ``a`` child to read its label from.
    """
    menu_root = sonata_dom.as_element(menu_root)
    nodes = []
    for index, item in enumerate(menu_root.xpath("./li"), start=1):
        item_position = position + (index,)
        links = item.xpath("./a")
        if not links:
            where = ".".join(str(part) for part in item_position)
            logging.warning(f"Menu item {where} has no label link")
            raise MalformedMenuError(f"Menu item {where} has no label link")

        label = sonata_dom.text_of(links[0])
        sub_menus = item.xpath("./ul")
        if not sub_menus:
            nodes.append(MenuLeaf(label))
        else:
            nodes.append(MenuGroup(label, extract_menu_tree(sub_menus[0], item_position)))
    return tuple(nodes)


def menu_tree_from_labels(labels):
    """
    Build a menu tree from the nested literal a test writes, e.g.
    ``["Dashboard", {"Board": ["Meetings", "Members"]}, "Reports"]``.
    """
    if isinstance(labels, (MenuLeaf, MenuGroup, Mapping)):
        labels = [labels]
    elif isinstance(labels, str):
        raise TypeError(f"Expected a list of menu items, got the string {labels!r}")

    nodes = []
    for entry in labels:
        if isinstance(entry, (MenuLeaf, MenuGroup)):
            nodes.append(entry)
        elif isinstance(entry, str):
            nodes.append(MenuLeaf(entry))
        elif isinstance(entry, Mapping):
            # Several keys in one mapping expand to sibling groups in insertion order.
            for label, children in entry.items():
                nodes.append(MenuGroup(label, menu_tree_from_labels(children)))
        else:
            raise TypeError(f"Unsupported menu entry {entry!r}: use a label string or a {{label: [...]}} mapping")
    return tuple(nodes)


def menu_labels(tree):
    labels = []
    for node in tree:
        if isinstance(node, MenuGroup):
            labels.append({node.label: menu_labels(node.children)})
        else:
            labels.append(node.label)
    return labels


def flatten_menu_labels(tree):
    labels = []
    for node in tree:
        labels.append(node.label)
        if isinstance(node, MenuGroup):
            labels.extend(flatten_menu_labels(node.children))
    return labels


def _canonical(tree):
    # Sibling order ignored at every depth.
    entries = []
    for node in tree:
        if isinstance(node, MenuGroup):
            entries.append(("group", node.label, _canonical(node.children)))
        else:
            entries.append(("leaf", node.label, ()))
    return tuple(sorted(entries))


def _menu_row_records(tree, level, parent):
    rows = []
    for node in tree:
        if isinstance(node, MenuGroup):
            rows.append((level, parent, node.label, "group"))
            path = f"{parent} > {node.label}" if parent else node.label
            rows.extend(_menu_row_records(node.children, level + 1, path))
        else:
            rows.append((level, parent, node.label, "leaf"))
    return rows


def menu_rows(tree):
    """One row per menu node: depth, ancestor path, label, kind and duplicate index."""
    frame = pd.DataFrame(_menu_row_records(tree, 1, ""), columns=MENU_COLUMNS[:-1])
    frame["Occurrence"] = frame.groupby(MENU_COLUMNS[:-1]).cumcount()
    return frame.astype({"Level": "int64", "Occurrence": "int64"})


def format_menu_tree(tree):
    return yaml.safe_dump(menu_labels(tree), allow_unicode=True, sort_keys=False, default_flow_style=False)


def describe_menu_difference(expected, actual):
    merged = menu_rows(expected).merge(menu_rows(actual), how="outer", on=MENU_COLUMNS, indicator=True)
    missing = merged.loc[merged["_merge"] == "left_only", MENU_COLUMNS[:-1]]
    unexpected = merged.loc[merged["_merge"] == "right_only", MENU_COLUMNS[:-1]]

    lines = [
        "Expected menu:",
        format_menu_tree(expected).rstrip(),
        "Actual menu:",
        format_menu_tree(actual).rstrip(),
    ]
    if not missing.empty:
        lines += ["Missing items:", missing.to_string(index=False)]
    if not unexpected.empty:
        lines += ["Unexpected items:", unexpected.to_string(index=False)]
    return "\n".join(lines)


def assert_menu_items_equal(page, expected_hierarchy):
    """
    Check that the sidebar menu has exactly the expected labels, nesting and order.

    Content is compared first, ignoring sibling order, so a wrong or missing item
    is reported as "Menu items do not match". Only when the content agrees is the
    order compared, reported as "Menu item order does not match".

    Parameters:
        page: The page (lxml element or HTML) containing the sidebar menu.
        expected_hierarchy (list): Labels and {group: [...]} mappings, e.g.
            ``["Dashboard", {"Board": ["Meetings", "Members"]}, "Reports"]``.
    """
    menus = find_menus(page)
    sonata_dom.assert_count(1, menus, "Menu not found on the page")

    actual = extract_menu_tree(menus[0])
    expected = menu_tree_from_labels(expected_hierarchy)

    if _canonical(expected) != _canonical(actual):
        raise AssertionError("Menu items do not match\n" + describe_menu_difference(expected, actual))

    if expected != actual:
        raise AssertionError(
            "Menu item order does not match\n"
            f"Expected order: {flatten_menu_labels(expected)}\n"
            f"Actual order:   {flatten_menu_labels(actual)}"
        )


def main(argv=None):
    config = sonata_dom.get_config()
    logging.basicConfig(
        level=config["runtime"]["log_level"],
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    parser = argparse.ArgumentParser(
        description="Print the sidebar menu of a saved Sonata admin page as a YAML hierarchy."
    )
    parser.add_argument("page", help="path to the saved HTML page")
    args = parser.parse_args(argv)

    with open(args.page, "rb") as page_file:
        page = sonata_dom.as_element(page_file.read())

    menus = find_menus(page)
    if not menus:
        logging.error(f"No sidebar menu was found in {args.page}.")
        return 1

    tree = extract_menu_tree(menus[0])
    logging.info(f"Extracted {len(flatten_menu_labels(tree))} menu item(s) from {args.page}")
    sys.stdout.write(format_menu_tree(tree))
    return 0


if __name__ == "__main__":
    sys.exit(main())
