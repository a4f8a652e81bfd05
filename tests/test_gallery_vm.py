"""Tests for the gallery view-model: fetch, grouping, carousel and deletes."""

from datetime import date

import pytest

from conftest import DAY, FakeRepository, make_image
from app.viewmodels.gallery_vm import MSG_DELETE_FAILED, MSG_DELETE_OK, MSG_FETCH_FAILED, GalleryVM
from core.services.carousel import AfterDeletePolicy

OTHER_DAY = date(2024, 5, 2)


@pytest.fixture
def repo(art_class):
    return FakeRepository(
        {
            DAY: art_class + [make_image(4, "Lunch")],
            OTHER_DAY: [make_image(20, "Music")],
        }
    )


@pytest.fixture
def vm(repo, notifier):
    model = GalleryVM(repo, child_id="c1", notifier=notifier, today=DAY)
    model.refresh()
    return model


class TestFetch:
    def test_startup_fetches_default_date(self, vm, repo):
        assert repo.fetch_calls == [("c1", DAY)]
        assert list(vm.grouped) == ["Art Class", "Lunch"]

    def test_folders_have_counts(self, vm):
        assert [(f.label, f.count) for f in vm.folders()] == [("Art Class", 3), ("Lunch", 1)]

    def test_date_change_replaces_grouping(self, vm, repo):
        assert vm.set_date(OTHER_DAY) is True
        assert list(vm.grouped) == ["Music"]
        assert repo.fetch_calls[-1] == ("c1", OTHER_DAY)

    def test_same_date_does_not_refetch(self, vm, repo):
        assert vm.set_date(DAY) is False
        assert len(repo.fetch_calls) == 1

    def test_failure_keeps_previous_grouping(self, vm, repo, notifier):
        repo.fail_fetch = True
        assert vm.refresh() is False
        assert list(vm.grouped) == ["Art Class", "Lunch"]
        assert notifier.errors == [MSG_FETCH_FAILED]

    def test_upload_success_refetches_selected_date(self, vm, repo):
        repo.images[DAY].append(make_image(5, "Lunch"))
        vm.on_upload_success()
        assert len(repo.fetch_calls) == 2
        assert len(vm.grouped["Lunch"]) == 2

    def test_change_listener(self, vm):
        calls = []
        vm.on_change(lambda: calls.append(list(vm.grouped)))
        vm.set_date(OTHER_DAY)
        assert calls == [["Music"]]

    def test_scheduler_receives_ticket(self, vm, repo):
        tickets = []
        vm.fetch_scheduler = tickets.append
        vm.set_date(OTHER_DAY)
        assert len(tickets) == 1
        assert tickets[0].day == OTHER_DAY
        # Nothing applied until the scheduled work completes
        assert list(vm.grouped) == ["Art Class", "Lunch"]
        vm.complete_fetch(tickets[0], vm.run_fetch(tickets[0]))
        assert list(vm.grouped) == ["Music"]


class TestStaleFetch:
    def test_older_response_never_overwrites_newer(self, vm):
        first = vm.start_fetch()
        first_images = [make_image(99, "Stale")]
        second = vm.start_fetch()

        assert vm.complete_fetch(second, [make_image(20, "Music")]) is True
        assert vm.complete_fetch(first, first_images) is False
        assert list(vm.grouped) == ["Music"]

    def test_stale_failure_is_silent(self, vm, notifier):
        first = vm.start_fetch()
        vm.start_fetch()
        vm.complete_fetch(first, None)
        assert notifier.errors == []


class TestCarouselIntegration:
    def test_example_scenario(self, vm):
        vm.open_folder("Art Class")
        assert vm.carousel.current_image.id == 1
        vm.key_bus.dispatch("ArrowRight")
        vm.key_bus.dispatch("ArrowRight")
        assert vm.carousel.selected_index == 2
        vm.key_bus.dispatch("ArrowRight")
        assert vm.carousel.selected_index == 0

    def test_image_vm_caption(self, vm):
        assert vm.current_image_vm() is None
        vm.open_folder("Art Class")
        vm.carousel.next()
        caption = vm.current_image_vm()
        assert caption.title == "Art Class"
        assert caption.counter == "2 / 3"

    def test_refetch_closes_when_group_disappears(self, vm):
        vm.open_folder("Art Class")
        vm.set_date(OTHER_DAY)
        assert not vm.carousel.is_open
        assert vm.key_bus.subscriber_count == 0

    def test_refetch_clamps_index(self, vm, repo):
        vm.open_folder("Art Class")
        vm.carousel.select(2)
        repo.images[DAY] = [make_image(1, "Art Class")]
        vm.refresh()
        assert vm.carousel.selected_index == 0

    def test_dispose_releases_keys(self, vm):
        vm.open_folder("Lunch")
        vm.dispose()
        assert vm.key_bus.subscriber_count == 0


class TestDeletion:
    def test_request_requires_open_image(self, vm):
        assert vm.request_delete() is None
        assert vm.deletion.pending is None

    def test_cancel_issues_no_request(self, vm, repo):
        vm.open_folder("Art Class")
        vm.request_delete()
        vm.cancel_delete()
        assert vm.confirm_delete() is None
        assert repo.delete_calls == []

    def test_confirm_removes_locally_and_closes(self, vm, repo, notifier):
        vm.open_folder("Art Class")
        vm.carousel.next()
        vm.request_delete()
        result = vm.confirm_delete()

        assert result.success
        assert repo.delete_calls == [2]
        assert [img.id for img in vm.grouped["Art Class"]] == [1, 3]
        assert not vm.carousel.is_open
        assert notifier.successes == [MSG_DELETE_OK]
        # Local splice, no refetch
        assert len(repo.fetch_calls) == 1

    def test_deleting_last_image_of_group_drops_group(self, vm):
        vm.open_folder("Lunch")
        vm.request_delete()
        vm.confirm_delete()
        assert "Lunch" not in vm.grouped
        assert vm.carousel.selected_group is None
        assert vm.carousel.selected_index is None

    def test_failure_leaves_state_untouched(self, vm, repo, notifier):
        repo.fail_delete = True
        vm.open_folder("Art Class")
        vm.request_delete()
        result = vm.confirm_delete()

        assert not result.success
        assert [img.id for img in vm.grouped["Art Class"]] == [1, 2, 3]
        assert vm.carousel.is_open
        assert notifier.errors == [MSG_DELETE_FAILED]

    def test_stay_policy_moves_to_adjacent_image(self, repo, notifier):
        vm = GalleryVM(
            repo, "c1", notifier=notifier, after_delete=AfterDeletePolicy.STAY, today=DAY
        )
        vm.refresh()
        vm.open_folder("Art Class")
        vm.carousel.next()
        vm.request_delete()
        vm.confirm_delete()

        assert vm.carousel.selected_group == "Art Class"
        assert vm.carousel.current_image.id == 3
        assert 0 <= vm.carousel.selected_index < len(vm.grouped["Art Class"])

    def test_stay_policy_on_last_index_clamps(self, repo, notifier):
        vm = GalleryVM(
            repo, "c1", notifier=notifier, after_delete=AfterDeletePolicy.STAY, today=DAY
        )
        vm.refresh()
        vm.open_folder("Art Class")
        vm.carousel.select(2)
        vm.request_delete()
        vm.confirm_delete()
        assert vm.carousel.selected_index == 1
        assert vm.carousel.current_image.id == 2

    def test_stay_policy_closes_when_group_empties(self, repo, notifier):
        vm = GalleryVM(
            repo, "c1", notifier=notifier, after_delete=AfterDeletePolicy.STAY, today=DAY
        )
        vm.refresh()
        vm.open_folder("Lunch")
        vm.request_delete()
        vm.confirm_delete()
        assert not vm.carousel.is_open
        assert vm.key_bus.subscriber_count == 0
