import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from iphoneorganizer import IOFailure, RunSummary
from iphoneorganizer.filelist import FileList
from iphoneorganizer.lean import lean, lean_positional


class LeanTestCase(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name) / "DESTINATION"

    def tearDown(self):
        self._tmp.cleanup()

    def touch(self, *parts) -> str:
        path = self.root.joinpath(*parts)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"x" * 10)
        return str(path)

    def path(self, *parts) -> str:
        return str(self.root.joinpath(*parts))

    def file_list(self, paths) -> FileList:
        return FileList(str(self.root), paths)


class TestLean(LeanTestCase):
    def test_deletes_file_missing_from_source(self):
        kept = self.touch("2022", "11", "IMG_8001.jpg")
        stale = self.touch("2022", "11", "IMG_8002.jpg")
        later = self.touch("2022", "12", "IMG_9001.jpg")
        source = self.file_list([self.path("2022", "11", "IMG_8001.JPG"), self.path("2022", "12", "IMG_9001.jpg")])
        summary = RunSummary()

        lean(self.file_list([kept, stale, later]), source, summary=summary)

        self.assertTrue(os.path.exists(kept))
        self.assertFalse(os.path.exists(stale))
        self.assertTrue(os.path.exists(later))
        self.assertEqual(summary["deleted"], 1)
        self.assertEqual(summary["freed_bytes"], 10)

    def test_same_name_in_other_month_is_not_a_match(self):
        moved = self.touch("2022", "11", "IMG_0001.jpg")
        source = self.file_list([self.path("2022", "12", "IMG_0001.jpg")])

        lean(self.file_list([moved]), source)

        self.assertFalse(os.path.exists(moved))

    def test_destination_file_missing_in_the_middle_keeps_later_files(self):
        first = self.touch("2022", "11", "a.jpg")
        third = self.touch("2022", "11", "c.jpg")
        source = self.file_list([self.path("2022", "11", name) for name in ("a.jpg", "b.jpg", "c.jpg")])

        lean(self.file_list([first, third]), source)

        self.assertTrue(os.path.exists(first))
        self.assertTrue(os.path.exists(third))

    def test_entries_that_are_not_files_are_left_alone(self):
        folder = self.path("2022", "11")
        os.makedirs(folder)
        gone = self.path("2022", "11", "gone.jpg")

        lean(self.file_list([folder, gone]), self.file_list([]))

        self.assertTrue(os.path.isdir(folder))

    def test_dry_run_keeps_files(self):
        stale = self.touch("2022", "11", "IMG_8002.jpg")
        summary = RunSummary()

        lean(self.file_list([stale]), self.file_list([]), dry_run=True, summary=summary)

        self.assertTrue(os.path.exists(stale))
        self.assertEqual(summary["deleted"], 1)

    def test_unorganized_source_list_is_rejected(self):
        stale = self.touch("2022", "11", "IMG_8001.jpg")
        source = FileList(str(self.root.parent / "SOURCE"), [str(self.root.parent / "SOURCE" / "202211__" / "IMG_8001.JPG")])

        with self.assertRaises(ValueError):
            lean(self.file_list([stale]), source)
        self.assertTrue(os.path.exists(stale))

    def test_delete_failure_aborts(self):
        stale = self.touch("2022", "11", "IMG_8002.jpg")

        with patch("iphoneorganizer.lean.os.remove", side_effect=PermissionError("denied")):
            with self.assertRaises(IOFailure):
                lean(self.file_list([stale]), self.file_list([]))


class TestLeanPositional(LeanTestCase):
    def test_single_gap_realigns(self):
        kept = self.touch("2022", "11", "IMG_8001.jpg")
        stale = self.touch("2022", "11", "IMG_8002.jpg")
        later = self.touch("2022", "12", "IMG_9001.jpg")
        source = self.file_list([self.path("2022", "11", "IMG_8001.JPG"), self.path("2022", "12", "IMG_9001.JPG")])
        summary = RunSummary()

        lean_positional(self.file_list([kept, stale, later]), source, summary=summary)

        self.assertTrue(os.path.exists(kept))
        self.assertFalse(os.path.exists(stale))
        self.assertTrue(os.path.exists(later))
        self.assertEqual(summary["deleted"], 1)

    def test_name_match_ignores_folders_and_case(self):
        a = self.touch("2022", "11", "img_0001.jpg")
        source = self.file_list([os.path.join("anywhere", "IMG_0001.JPG")])

        lean_positional(self.file_list([a]), source)

        self.assertTrue(os.path.exists(a))

    def test_consecutive_gaps(self):
        paths = [self.touch("2022", "11", f"{name}.jpg") for name in "abcd"]
        source = self.file_list([self.path("2022", "11", "a.jpg"), self.path("2022", "11", "d.jpg")])

        lean_positional(self.file_list(paths), source)

        self.assertEqual([os.path.exists(p) for p in paths], [True, False, False, True])

    def test_files_past_end_of_source_are_removed(self):
        paths = [self.touch("2022", "11", f"{name}.jpg") for name in "abc"]

        lean_positional(self.file_list(paths), self.file_list([self.path("2022", "11", "a.jpg")]))

        self.assertEqual([os.path.exists(p) for p in paths], [True, False, False])

    def test_insertion_is_not_handled(self):
        # destination lacks b.jpg: the positional pass drops c.jpg, the path-keyed pass does not
        first = self.touch("2022", "11", "a.jpg")
        third = self.touch("2022", "11", "c.jpg")
        source = self.file_list([self.path("2022", "11", name) for name in ("a.jpg", "b.jpg", "c.jpg")])

        lean_positional(self.file_list([first, third]), source)

        self.assertTrue(os.path.exists(first))
        self.assertFalse(os.path.exists(third))

    def test_dry_run_still_realigns(self):
        paths = [self.touch("2022", "11", f"{name}.jpg") for name in "abc"]
        source = self.file_list([self.path("2022", "11", "a.jpg"), self.path("2022", "11", "c.jpg")])
        summary = RunSummary()

        lean_positional(self.file_list(paths), source, dry_run=True, summary=summary)

        self.assertTrue(all(os.path.exists(p) for p in paths))
        self.assertEqual(summary["deleted"], 1)


if __name__ == "__main__":
    unittest.main()
