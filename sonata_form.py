"""Form field assertions for SonataAdminBundle edit and create pages.

Fields are looked up by the text of their ``label.control-label`` and then by the
``div.sonata-ba-field`` container that follows the label.
"""

import sonata_dom


def _class(name):
    return sonata_dom.has_class(sonata_dom.selector(name))


def _field_container_xpath():
    return f"div[{_class('field_container_class')}]"


def form_field_label_xpath():
    form_group = f"form//div[{_class('form_group_class')}]"
    label = f"label[{_class('field_label_class')} and normalize-space()=$label]"
    return f"{form_group}/{label}"


def _field_control_xpath(control):
    return f"{form_field_label_xpath()}/following-sibling::{_field_container_xpath()}//{control}"


def form_text_field_xpath():
    return _field_control_xpath(f"input[@type='text' and {_class('form_control_class')}]")


def form_number_field_xpath():
    return _field_control_xpath(f"input[@type='number' and {_class('form_control_class')}]")


def form_textarea_field_xpath():
    return _field_control_xpath(f"textarea[{_class('form_control_class')}]")


def select_field_xpath():
    return _field_control_xpath(f"select[{_class('form_control_class')}]")


def select_field_with_autocomplete_xpath():
    # Sonata renders autocomplete selects without a marker class of their own.
    return _field_control_xpath("select")


def file_field_xpath():
    return _field_control_xpath("input[@type='file']")


def select_option_xpath():
    return f"{select_field_xpath()}/option[normalize-space()=$option]"


def form_checkbox_field_xpath():
    label = f"label/span[{_class('checkbox_label_class')} and normalize-space()=$label]"
    return f"form//{_field_container_xpath()}//{label}/preceding-sibling::input[@type='checkbox']"


def form_field_errors_xpath():
    return f"{form_field_label_xpath()}/following-sibling::{_field_container_xpath()}//div[{_class('field_errors_class')}]"


def form_action_button_xpaths():
    container = f"div[{_class('form_actions_class')}]"
    return (
        f"{container}/button[@type='submit' and normalize-space()=$title]",
        f"{container}/a[normalize-space()=$title]",
    )


def _find_field(field_xpath, label, form):
    return sonata_dom.xpath(form, field_xpath, label=label)


def _assert_field_exists(field_xpath, label, form, message=None):
    sonata_dom.assert_count(
        1,
        _find_field(field_xpath, label, form),
        message or f'Field with title "{label}" not found',
    )


def _assert_field_value_equals(expected_value, label, form, field_xpath, read_value):
    _assert_field_exists(field_xpath, label, form)

    field = _find_field(field_xpath, label, form)[0]
    sonata_dom.assert_equal(
        expected_value,
        read_value(field),
        f'The value in the input field "{label}" does not match what is expected',
    )


def _input_value(field):
    return sonata_dom.normalize_space(field.get("value"))


def assert_form_text_field_value_equals(expected_input_value, label, form):
    """
    Check the value of a text input, ignoring leading, trailing and repeated spaces.

    Parameters:
        expected_input_value (str): Expected value, already space-normalized.
        label (str): Text of the field's label.
        form: The form (or the page holding it) as an lxml element or HTML.
    """
    _assert_field_value_equals(expected_input_value, label, form, form_text_field_xpath(), _input_value)


def assert_form_number_field_value_equals(expected_input_value, label, form):
    _assert_field_value_equals(expected_input_value, label, form, form_number_field_xpath(), _input_value)


def assert_form_textarea_field_value_equals(expected_input_value, label, form):
    _assert_field_value_equals(expected_input_value, label, form, form_textarea_field_xpath(), sonata_dom.text_of)


def assert_form_text_field_exists(label, form):
    _assert_field_exists(form_text_field_xpath(), label, form)


def assert_form_number_field_exists(label, form):
    _assert_field_exists(form_number_field_xpath(), label, form)


def assert_form_textarea_field_exists(label, form):
    _assert_field_exists(form_textarea_field_xpath(), label, form)


def assert_form_checkbox_field_exists(label, form):
    _assert_field_exists(form_checkbox_field_xpath(), label, form)


def assert_form_checkbox_field_exists_and_checked(label, form):
    assert_form_checkbox_field_exists(label, form)

    checkbox = _find_field(form_checkbox_field_xpath(), label, form)[0]
    sonata_dom.assert_true(
        checkbox.get("checked") is not None,
        f'Field with title "{label}" is not checked',
    )


def assert_form_checkbox_field_exists_and_unchecked(label, form):
    assert_form_checkbox_field_exists(label, form)

    checkbox = _find_field(form_checkbox_field_xpath(), label, form)[0]
    sonata_dom.assert_true(
        checkbox.get("checked") is None,
        f'Field with title "{label}" is checked',
    )


def assert_file_form_field_exists(label, form):
    _assert_field_exists(file_field_xpath(), label, form, f'File field with title "{label}" not found')


def get_selected_value(select_element):
    """Value of the first selected option, stripped; None when nothing is selected."""
    selected = sonata_dom.css(select_element, "option[selected]")
    if not selected:
        return None
    return (selected[0].get("value") or "").strip()


def get_selected_values(select_element):
    return [(option.get("value") or "").strip() for option in select_element.xpath("./option[@selected]")]


def assert_select_form_field_exists(label, form):
    _assert_field_exists(select_field_xpath(), label, form)


def assert_select_form_field_value_equals(expected_value, label, form):
    """
    Check the selected value of a select box.

    An empty ``expected_value`` also accepts a select with no option selected.
    """
    message = f'The field with title "{label}" and value "{expected_value}" not found'

    selects = _find_field(select_field_xpath(), label, form)
    sonata_dom.assert_true(selects, f'Field with title "{label}" not found')
    select_element = selects[0]

    if expected_value == "":
        selected_values = get_selected_values(select_element)
        if len(selected_values) == 1:
            sonata_dom.assert_equal(expected_value, selected_values[0], message)
        else:
            sonata_dom.assert_count(0, selected_values, message)
    else:
        sonata_dom.assert_equal(expected_value, get_selected_value(select_element), message)


def assert_select_option_exists(select_label, option_title, form):
    nodes = sonata_dom.xpath(form, select_option_xpath(), label=select_label, option=option_title)
    sonata_dom.assert_count(
        1,
        nodes,
        f'The value "{option_title}" in the field with title "{select_label}" not found',
    )


def assert_multiple_select_form_field_with_autocomplete_exists(label, form):
    _assert_field_exists(select_field_with_autocomplete_xpath(), label, form)


def format_values(values):
    return ", ".join(f'"{value}"' for value in values)


def assert_multiple_select_form_field_with_autocomplete_value_equals(expected_values, label, form):
    """
    Check that a multiple select holds exactly ``expected_values``, in any order.

    The failure message lists both the expected values that are not selected and
    the selected values that were not expected.
    """
    selects = _find_field(select_field_with_autocomplete_xpath(), label, form)
    sonata_dom.assert_true(selects, f'Field with title "{label}" not found')

    values = get_selected_values(selects[0])
    not_found = [value for value in expected_values if value not in values]
    extra_found = [value for value in values if value not in expected_values]

    details = []
    if not_found:
        details.append(f"no values {format_values(not_found)} found")
    if extra_found:
        details.append(f"extra values {format_values(extra_found)} found")

    sonata_dom.assert_true(
        not not_found and not extra_found,
        f'In the field with title "{label}" ' + " and ".join(details),
    )


def find_form_action_buttons(action_title, page):
    return sonata_dom.xpath(page, *form_action_button_xpaths(), title=action_title)


def assert_form_action_button_exists(action_title, page):
    sonata_dom.assert_count(
        1,
        find_form_action_buttons(action_title, page),
        f'There is no button "{action_title}" on the form',
    )


def assert_form_action_button_not_exists(action_title, page):
    sonata_dom.assert_count(
        0,
        find_form_action_buttons(action_title, page),
        f'There is a button "{action_title}" on the form',
    )


def assert_form_field_contains_error(label, error, page):
    errors_container = sonata_dom.xpath(page, form_field_errors_xpath(), label=label)
    sonata_dom.assert_count(1, errors_container, f'Could not uniquely find the field "{label}" with errors')
    sonata_dom.assert_contains(
        error,
        sonata_dom.text_of(errors_container[0]),
        "The error is not equal to the expected",
    )


def find_sub_admin_table(title, form):
    """Tables of an embedded admin (e.g. a one-to-many collection) rendered under the given label."""
    table_class = _class("sub_admin_table_class")
    return sonata_dom.xpath(
        form,
        f"{form_field_label_xpath()}/following-sibling::div//table[{table_class}]",
        label=title,
    )
