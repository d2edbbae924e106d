"""Tests for the file list view state: rename, delete, selection, batch, preview."""

import pytest

from cloudlocker.core.errors import NetworkOrServerFailure
from cloudlocker.core.file_list import BatchPhase, FileListController, RowState
from cloudlocker.core.notify import ERROR, SUCCESS, WARNING

from conftest import make_file


@pytest.fixture
def controller(fake_api, notify, handles):
    c = FileListController(fake_api, notify=notify, handles=handles)
    c.reload()
    fake_api.calls.clear()
    return c


class TestReload:
    def test_rows_follow_server_order(self, controller):
        assert [r.file.id for r in controller.rows] == [1, 2, 3]
        assert all(r.state is RowState.NORMAL for r in controller.rows)

    def test_failure_notifies_and_keeps_rows(self, controller, fake_api, notifications):
        fake_api.fail["list_files"] = NetworkOrServerFailure("down")
        assert controller.reload() is False
        assert notifications == [(ERROR, "Failed to load files: down")]
        assert len(controller.rows) == 3
        assert controller.loading is False

    def test_surviving_rows_keep_state_and_selection_is_pruned(self, controller, fake_api):
        controller.begin_rename(2)
        controller.toggle_select(1)
        controller.toggle_select(3)
        fake_api.files = [f for f in fake_api.files if f.id != 3]
        controller.reload()
        assert controller.row(2).state is RowState.EDITING
        assert controller.selected_ids() == [1]


class TestRename:
    def test_extension_is_preserved(self, controller, fake_api, notifications):
        assert controller.begin_rename(1)
        assert controller.row(1).edit_text == "report"
        controller.set_edit_text(1, "report_final")
        assert controller.save_rename(1) is True
        assert fake_api.calls_to("rename_file") == [("rename_file", 1, "report_final.pdf")]
        assert controller.row(1).state is RowState.NORMAL
        assert controller.row(1).file.file_name == "report_final.pdf"
        assert (SUCCESS, "File renamed successfully") in notifications
        assert fake_api.calls_to("list_files")

    def test_empty_name_rejected_locally(self, controller, fake_api, notifications):
        controller.begin_rename(1)
        controller.set_edit_text(1, "   ")
        assert controller.save_rename(1) is False
        assert fake_api.calls == []
        assert controller.row(1).state is RowState.EDITING
        assert notifications == [(ERROR, "File name cannot be empty")]

    def test_failure_returns_to_editing_with_buffer(self, controller, fake_api, notifications):
        fake_api.fail["rename_file"] = {1}
        controller.begin_rename(1)
        controller.set_edit_text(1, "draft")
        assert controller.save_rename(1) is False
        row = controller.row(1)
        assert row.state is RowState.EDITING
        assert row.edit_text == "draft"
        assert notifications[-1][0] == ERROR
        assert notifications[-1][1].startswith("Failed to rename file:")

    def test_unchanged_name_makes_no_request(self, controller, fake_api):
        controller.begin_rename(1)
        assert controller.save_rename(1) is True
        assert fake_api.calls == []
        assert controller.row(1).state is RowState.NORMAL

    def test_cancel(self, controller):
        controller.begin_rename(2)
        controller.set_edit_text(2, "other")
        assert controller.cancel_rename(2)
        assert controller.row(2).state is RowState.NORMAL
        assert controller.row(2).edit_text == ""

    def test_only_one_action_per_row(self, controller):
        controller.begin_rename(1)
        assert controller.delete_file(1) is False
        assert controller.begin_rename(1) is False


class TestDelete:
    def test_success_reloads(self, controller, fake_api, notifications):
        assert controller.delete_file(2) is True
        assert [r.file.id for r in controller.rows] == [1, 3]
        assert (SUCCESS, "File deleted successfully") in notifications
        assert fake_api.calls_to("list_files")

    def test_failure_returns_to_normal(self, controller, fake_api, notifications):
        fake_api.fail["delete_file"] = {2}
        assert controller.delete_file(2) is False
        assert controller.row(2).state is RowState.NORMAL
        assert notifications[-1][0] == ERROR

    def test_row_not_stuck_when_reload_fails(self, controller, fake_api):
        fake_api.fail["list_files"] = NetworkOrServerFailure("down")
        assert controller.delete_file(2) is True
        assert controller.row(2).state is RowState.NORMAL


class TestSelection:
    def test_toggle(self, controller):
        assert controller.toggle_select(2) is True
        assert controller.is_selected(2)
        assert controller.toggle_select(2) is False
        assert controller.selected_ids() == []

    def test_toggle_unknown_id(self, controller):
        assert controller.toggle_select(99) is False
        assert controller.selected_ids() == []

    def test_toggle_all(self, controller):
        controller.toggle_select(1)
        controller.toggle_select_all()
        assert controller.selected_ids() == [1, 2, 3]
        assert controller.all_selected
        controller.toggle_select_all()
        assert controller.selected_ids() == []

    def test_toggle_all_with_no_files(self, fake_api, notify):
        fake_api.files = []
        c = FileListController(fake_api, notify=notify)
        c.reload()
        c.toggle_select_all()
        assert c.selected_ids() == []
        assert not c.all_selected


class TestBatch:
    def test_download_requires_selection(self, controller, fake_api, notifications, tmp_path):
        assert controller.batch_download(str(tmp_path / "files.zip")) is False
        assert notifications == [(ERROR, "No files selected")]
        assert fake_api.calls == []

    def test_download_writes_archive(self, controller, fake_api, tmp_path):
        controller.toggle_select(1)
        controller.toggle_select(3)
        dest = tmp_path / "out" / "files.zip"
        assert controller.batch_download(str(dest)) is True
        assert dest.read_bytes() == b"PK\x03\x04zip"
        assert fake_api.calls_to("batch_download") == [("batch_download", [1, 3])]
        assert controller.batch_phase is BatchPhase.IDLE

    def test_delete_partial_failure(self, controller, fake_api, notifications):
        fake_api.fail["delete_file"] = {2}
        controller.toggle_select_all()
        progress = []
        result = controller.batch_delete(on_progress=lambda done, total: progress.append((done, total)))

        assert result.summary == "2/3"
        assert sorted(result.succeeded) == [1, 3]
        assert list(result.failed) == [2]
        assert sorted(p[0] for p in progress) == [1, 2, 3]
        assert all(p[1] == 3 for p in progress)
        assert (WARNING, "Deleted 2/3 files") in notifications
        assert fake_api.calls_to("list_files")
        assert [r.file.id for r in controller.rows] == [2]
        assert controller.selected_ids() == []
        assert controller.batch_phase is BatchPhase.IDLE

    def test_delete_all_succeed(self, controller, notifications):
        controller.toggle_select(1)
        result = controller.batch_delete()
        assert result.ok
        assert (SUCCESS, "Deleted 1/1 files") in notifications

    def test_delete_all_fail(self, controller, fake_api, notifications):
        fake_api.fail["delete_file"] = {1, 2}
        controller.toggle_select(1)
        controller.toggle_select(2)
        result = controller.batch_delete()
        assert result.summary == "0/2"
        assert (ERROR, "Failed to delete files (0/2)") in notifications

    def test_delete_requires_selection(self, controller, notifications):
        assert controller.batch_delete() is None
        assert notifications == [(ERROR, "No files selected")]


class TestDownload:
    def test_single_download(self, controller, tmp_path):
        dest = tmp_path / "report.pdf"
        assert controller.download_file(1, str(dest)) is True
        assert dest.read_bytes() == b"payload-1"

    def test_failure_notifies(self, controller, fake_api, notifications, tmp_path):
        fake_api.fail["download_file"] = {1}
        assert controller.download_file(1, str(tmp_path / "x")) is False
        assert notifications[-1][0] == ERROR


class TestPreview:
    def test_switching_releases_previous_handle(self, controller, handles):
        a = controller.open_preview(2)
        fake = make_file(4, "clip.mp4", "video/mp4")
        controller.set_files(controller.files + [fake])
        b = controller.open_preview(4)
        assert a.handle.released
        assert not b.handle.released
        assert handles.live_count() == 1
        controller.close_preview()
        assert handles.live_count() == 0
        assert controller.current_preview is None

    def test_previous_handle_gone_before_next_is_created(self, controller, handles):
        a = controller.open_preview(2)
        controller.set_files(controller.files + [make_file(4, "clip.mp4", "video/mp4")])
        original = handles.create
        live_at_create = []

        def counting_create(data, suffix=""):
            live_at_create.append(handles.live_count())
            return original(data, suffix)

        handles.create = counting_create
        b = controller.open_preview(4)
        assert live_at_create == [0]
        assert a.handle.released
        assert b.handle.path.endswith(".mp4")
        assert handles.live_count() == 1

    def test_non_previewable_is_fallback(self, controller, fake_api, handles):
        s = controller.open_preview(3)
        assert s.is_fallback
        assert fake_api.calls_to("view_file") == []
        assert handles.live_count() == 0

    def test_fetch_failure(self, controller, fake_api, notifications, handles):
        fake_api.fail["view_file"] = {1}
        assert controller.open_preview(1) is None
        assert notifications[-1][1].startswith("Failed to load preview:")
        assert handles.live_count() == 0

    def test_close_during_fetch_discards_result(self, controller, fake_api, handles):
        original = fake_api.view_file

        def view_then_close(file_id):
            data = original(file_id)
            controller.close_preview()
            return data

        fake_api.view_file = view_then_close
        assert controller.open_preview(2) is None
        assert handles.live_count() == 0

    def test_dispose_releases_everything(self, controller, handles):
        controller.open_preview(2)
        controller.dispose()
        assert handles.live_count() == 0
