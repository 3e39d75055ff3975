"""Shared DOM queries, assertion primitives and configuration for the Sonata admin helpers."""

from functools import lru_cache
from pathlib import Path
import copy
import logging
import os

from lxml import html as lhtml
from lxml.cssselect import CSSSelector
import yaml


CONFIG_PATH = Path(__file__).resolve().with_name("config.yaml")
CONFIG_ENV_VAR = "SONATA_TEST_UTILS_CONFIG"

DEFAULT_CONFIG = {
    "selectors": {
        "menu": "ul[@class='sidebar-menu']",
        "menu_group_class": "treeview",
        "menu_group_menu_class": "treeview-menu",
        "tab_labels_class": "nav-tabs",
        "tab_pane_class": "tab-pane",
        "flash_success": 'div[class="alert alert-success fade in"]',
        "flash_error": 'div[class="alert alert-error fade in"]',
        "flash_warning": 'div[class="alert alert-warning fade in"]',
        "form_group_class": "form-group",
        "field_label_class": "control-label",
        "checkbox_label_class": "control-label__text",
        "field_container_class": "sonata-ba-field",
        "field_errors_class": "sonata-ba-field-error-messages",
        "form_control_class": "form-control",
        "form_actions_class": "sonata-ba-form-actions",
        "sub_admin_table_class": "table",
        "action_element_class": "sonata-action-element",
        "batch_action_select_name": "action",
    },
    "runtime": {
        "log_level": "INFO",
    },
}


def _merge(base, override):
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge(base[key], value)
        else:
            base[key] = value
    return base


def load_config(config_path=None):
    """
    Load selector and runtime settings.

    Parameters:
        config_path (str | Path): YAML file to read. Defaults to the file named by
            the SONATA_TEST_UTILS_CONFIG environment variable, then to the
            config.yaml shipped next to this module.

    Returns:
        dict: DEFAULT_CONFIG with the file's values merged over it.
    """
    explicit = config_path is not None or bool(os.environ.get(CONFIG_ENV_VAR))
    if config_path is None:
        config_path = os.environ.get(CONFIG_ENV_VAR) or CONFIG_PATH
    config_path = Path(config_path)

    config = copy.deepcopy(DEFAULT_CONFIG)
    if not explicit and not config_path.is_file():
        logging.debug(f"No config file at {config_path}, using built-in selectors")
        return config

    with open(config_path, "r", encoding="utf-8") as config_file:
        loaded = yaml.safe_load(config_file)
    if loaded is None:
        return config
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {config_path} must contain a mapping, got {type(loaded).__name__}")
    return _merge(config, loaded)


@lru_cache(maxsize=None)
def get_config():
    return load_config()


def reset_config():
    get_config.cache_clear()


def selector(name):
    return get_config()["selectors"][name]


def has_class(class_name):
    """XPath predicate matching ``class_name`` as a whole token of the class attribute."""
    return f"contains(concat(' ', normalize-space(@class), ' '), ' {class_name} ')"


def normalize_space(text):
    return " ".join((text or "").split())


def text_of(element):
    return normalize_space(element.text_content())


def as_element(source):
    """
    Return an lxml element for ``source``.

    Raw HTML (str or bytes) is parsed with lxml.html; parsed trees are unwrapped
    to their root element; elements are returned unchanged.
    """
    if isinstance(source, (str, bytes)):
        return lhtml.fromstring(source)
    if hasattr(source, "getroot"):
        return source.getroot()
    return source


def xpath(source, *paths, **variables):
    """
    Evaluate one or more relative location paths below ``source``.

    Each path is anchored with ``descendant-or-self::`` so the context element
    itself can match. Several paths are combined into a union, returned in
    document order. Keyword arguments become XPath variables (``$label``),
    which keeps labels containing quotes out of the expression text.
    """
    element = as_element(source)
    expression = " | ".join(f"descendant-or-self::{path}" for path in paths)
    nodes = element.xpath(expression, **variables)
    logging.debug(f"XPath {expression} {variables or ''} matched {len(nodes)} node(s)")
    return nodes


def css(source, css_selector):
    element = as_element(source)
    nodes = CSSSelector(css_selector, translator="html")(element)
    logging.debug(f"CSS {css_selector} matched {len(nodes)} node(s)")
    return nodes


def assert_count(expected_count, nodes, message=""):
    actual_count = len(nodes)
    if actual_count != expected_count:
        raise AssertionError(f"{message}\nExpected {expected_count} matching element(s), found {actual_count}.")


def assert_equal(expected, actual, message=""):
    if expected != actual:
        raise AssertionError(f"{message}\nExpected: {expected!r}\nActual:   {actual!r}")


def assert_true(condition, message=""):
    if not condition:
        raise AssertionError(message)


def assert_contains(needle, haystack, message=""):
    if needle not in haystack:
        raise AssertionError(f"{message}\nExpected {haystack!r} to contain {needle!r}.")
