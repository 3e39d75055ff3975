import pytest

import sonata_actions


LIST_PAGE = """
<div class="content-wrapper">
  <nav class="navbar">
    <ul class="nav navbar-nav navbar-right">
      <li><a class="sonata-action-element" href="/admin/app/user/create"><i class="fa fa-plus-circle"></i> Add new</a></li>
      <li><a class="sonata-action-element" href="/admin/app/user/export">Export</a></li>
      <li><a class="btn" href="/admin/app/user/import">Import</a></li>
    </ul>
  </nav>
  <form action="/admin/app/user/batch" method="POST">
    <select name="action">
      <option value="delete">Delete</option>
      <option value="approve">Approve</option>
    </select>
    <select name="per_page"><option value="32">Archive</option></select>
  </form>
</div>
"""


def test_assert_action_button_exists():
    sonata_actions.assert_action_button_exists("Add new", LIST_PAGE)
    sonata_actions.assert_action_button_exists("Export", LIST_PAGE)


def test_assert_action_button_ignores_links_without_action_class():
    sonata_actions.assert_action_button_not_exists("Import", LIST_PAGE)

    with pytest.raises(AssertionError, match='There is no action "Import" on the page'):
        sonata_actions.assert_action_button_exists("Import", LIST_PAGE)


def test_assert_action_button_not_exists_fails_for_present_action():
    with pytest.raises(AssertionError, match='There is an action "Export" on the page'):
        sonata_actions.assert_action_button_not_exists("Export", LIST_PAGE)


def test_assert_list_batch_action_button_exists():
    sonata_actions.assert_list_batch_action_button_exists("Approve", LIST_PAGE)
    sonata_actions.assert_list_batch_action_button_not_exists("Archive", LIST_PAGE)


def test_assert_list_batch_action_button_not_exists_fails_for_present_action():
    with pytest.raises(AssertionError, match='There is a batch action "Delete" on the page'):
        sonata_actions.assert_list_batch_action_button_not_exists("Delete", LIST_PAGE)
