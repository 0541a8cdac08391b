import dataclasses
import unittest

import pandas as pd

from tdp_finder.core.annotate import annotate, resolve_tdp
from tdp_finder.core.dataset import build_dataset
from tdp_finder.core.errors import (
    DataLoadError,
    InvalidArgument,
    MissingField,
    UnknownProcessor,
)
from tdp_finder.core.model import ReferenceDataset
from tdp_finder.core.normalize import normalize_name, normalize_names, split_processors


def _dataset(**entries):
    return ReferenceDataset(entries=entries, n_sources=1)


class NormalizeTests(unittest.TestCase):
    def test_variant_suffix_and_whitespace_removed(self):
        self.assertEqual("Intel Xeon E5", normalize_name("Intel Xeon E5@2.1GHz"))
        self.assertEqual("Intel Xeon E5", normalize_name("  Intel Xeon E5 @ 2.1GHz"))
        self.assertEqual(normalize_name("Intel Xeon E5@2.1GHz"), normalize_name("Intel Xeon E5"))

    def test_only_first_marker_splits(self):
        self.assertEqual("AMD EPYC 7763", normalize_name("AMD EPYC 7763@2.45GHz@boost"))

    def test_vectorised_names_match_scalar(self):
        raw = pd.Series(["Intel Xeon E5@2.1GHz", " AMD EPYC 7763 ", "Intel Xeon E5"])
        self.assertEqual(["Intel Xeon E5", "AMD EPYC 7763", "Intel Xeon E5"],
                         normalize_names(raw).tolist())

    def test_split_processors_trims_tokens(self):
        self.assertEqual(["A", "B", "C"], split_processors("A, B ,C"))


class BuildDatasetTests(unittest.TestCase):
    def test_later_source_only_raises_values(self):
        ds = build_dataset(["A,100\nB,50", "A,90\nB,60\nC,10"])
        self.assertEqual(100.0, ds["A"])
        self.assertEqual(60.0, ds["B"])
        self.assertEqual(10.0, ds["C"])
        self.assertEqual(2, ds.n_sources)

    def test_tie_in_later_source_keeps_value(self):
        ds = build_dataset(["A,100", "A@3GHz,100"])
        self.assertEqual({"A": 100.0}, dict(ds.entries))

    def test_duplicate_in_primary_source_last_line_wins(self):
        ds = build_dataset(["A,100\nA,80"])
        self.assertEqual(80.0, ds["A"])

    def test_duplicate_in_supplementary_source_keeps_max(self):
        ds = build_dataset(["B,1", "A,10\nA,5\nA,12"])
        self.assertEqual(12.0, ds["A"])

    def test_primary_entries_survive_omission(self):
        ds = build_dataset(["A,100\nB,20", "C,30", "D,40"])
        self.assertEqual(["A", "B", "C", "D"], sorted(ds))

    def test_normalized_names_merge_across_sources(self):
        ds = build_dataset(["Intel Xeon E5 @2.1GHz,95", "Intel Xeon E5,105"])
        self.assertEqual(1, len(ds))
        self.assertEqual(105.0, ds["Intel Xeon E5"])

    def test_carriage_returns_and_blank_lines(self):
        ds = build_dataset(["A,65\r\nB,95\r\n\r\n"])
        self.assertEqual({"A": 65.0, "B": 95.0}, dict(ds.entries))

    def test_empty_name_lines_are_skipped(self):
        ds = build_dataset([",100\nA,5\n"])
        self.assertEqual({"A": 5.0}, dict(ds.entries))

    def test_split_on_first_comma_only(self):
        with self.assertRaises(DataLoadError):
            build_dataset(["A,65,extra"])

    def test_non_numeric_tdp_fails_with_line_number(self):
        with self.assertRaises(DataLoadError) as ctx:
            build_dataset(["A,65\nB,n/a"], labels=["cpus.csv"])
        self.assertIn("cpus.csv", str(ctx.exception))
        self.assertIn("2", str(ctx.exception))

    def test_missing_tdp_field_fails(self):
        with self.assertRaises(DataLoadError):
            build_dataset(["A"])

    def test_single_string_rejected(self):
        with self.assertRaises(DataLoadError):
            build_dataset("A,65")

    def test_empty_sources_give_empty_dataset(self):
        ds = build_dataset([])
        self.assertEqual(0, len(ds))
        self.assertTrue(ds.to_frame().empty)

    def test_dataset_is_read_only(self):
        ds = build_dataset(["A,65"])
        with self.assertRaises(TypeError):
            ds.entries["A"] = 1.0
        with self.assertRaises(dataclasses.FrozenInstanceError):
            ds.n_sources = 5

    def test_dataset_is_hashable(self):
        a = build_dataset(["A,65\nB,95"])
        b = build_dataset(["B,95\nA,65"])
        self.assertEqual(a, b)
        self.assertEqual(hash(a), hash(b))
        self.assertEqual(1, len({a, b}))

    def test_to_frame_sorted_by_name(self):
        frame = build_dataset(["B,2\nA,1"]).to_frame()
        self.assertEqual(["A", "B"], frame["name"].tolist())
        self.assertEqual([1.0, 2.0], frame["tdp_W"].tolist())


class AnnotateTests(unittest.TestCase):
    def setUp(self):
        self.ds = _dataset(A=65.0, B=95.0, C=35.0)

    def test_running_max_not_sum(self):
        records = [{"physical-processor": "A, B"}, {"physical-processor": "B,A,C"}]
        out = annotate(self.ds, records)
        self.assertEqual([95.0, 95.0], [r["thermal-design-power"] for r in out])

    def test_same_objects_returned_in_order(self):
        records = [{"physical-processor": p, "id": i} for i, p in enumerate(["C", "A", "B"])]
        out = annotate(self.ds, records)
        self.assertEqual(len(records), len(out))
        for before, after in zip(records, out):
            self.assertIs(before, after)
        self.assertEqual([35.0, 65.0, 95.0], [r["thermal-design-power"] for r in out])

    def test_existing_value_is_overwritten(self):
        record = {"physical-processor": "A", "thermal-design-power": 999}
        annotate(self.ds, [record])
        self.assertEqual(65.0, record["thermal-design-power"])

    def test_idempotent(self):
        record = {"physical-processor": "A, C"}
        annotate(self.ds, [record])
        first = record["thermal-design-power"]
        annotate(self.ds, [record])
        self.assertEqual(first, record["thermal-design-power"])

    def test_other_fields_untouched(self):
        record = {"physical-processor": "B", "timestamp": "2023-07-06T00:00", "duration": 3600}
        annotate(self.ds, [record])
        self.assertEqual("2023-07-06T00:00", record["timestamp"])
        self.assertEqual(3600, record["duration"])

    def test_unknown_processor_names_offender(self):
        with self.assertRaises(UnknownProcessor) as ctx:
            annotate(self.ds, [{"physical-processor": "A, GhostChip"}])
        self.assertEqual("GhostChip", ctx.exception.processor)
        self.assertIn("GhostChip", str(ctx.exception))
        self.assertIn("check spelling", str(ctx.exception))

    def test_atomic_failure_leaves_batch_untouched(self):
        good = {"physical-processor": "A"}
        bad = {"physical-processor": "GhostChip"}
        with self.assertRaises(UnknownProcessor):
            annotate(self.ds, [good, bad])
        self.assertNotIn("thermal-design-power", good)
        self.assertNotIn("thermal-design-power", bad)

    def test_eager_failure_keeps_earlier_records(self):
        good = {"physical-processor": "B"}
        bad = {"physical-processor": "A, GhostChip"}
        with self.assertRaises(UnknownProcessor):
            annotate(self.ds, [good, bad], atomic=False)
        self.assertEqual(95.0, good["thermal-design-power"])
        self.assertEqual(0, bad["thermal-design-power"])

    def test_missing_field(self):
        with self.assertRaises(MissingField) as ctx:
            annotate(self.ds, [{"physical-processor": "A"}, {"cpu": "A"}])
        self.assertIsInstance(ctx.exception, LookupError)
        self.assertEqual(1, ctx.exception.index)
        self.assertIn("physical-processor not provided", str(ctx.exception))

    def test_absent_input(self):
        with self.assertRaises(InvalidArgument) as ctx:
            annotate(self.ds, None)
        self.assertIn("Required Parameters not provided", str(ctx.exception))

    def test_single_record_instead_of_list(self):
        with self.assertRaises(InvalidArgument) as ctx:
            annotate(self.ds, {"physical-processor": "A"})
        self.assertIsInstance(ctx.exception, TypeError)
        self.assertIn("Inputs must be an array", str(ctx.exception))

    def test_non_mapping_record(self):
        with self.assertRaises(InvalidArgument):
            annotate(self.ds, ["A"])

    def test_tuple_and_empty_batches(self):
        self.assertEqual([], annotate(self.ds, []))
        record = {"physical-processor": "C"}
        self.assertEqual([record], annotate(self.ds, (record,)))

    def test_resolve_tdp_direct(self):
        self.assertEqual(95.0, resolve_tdp(self.ds, "C,B"))
        with self.assertRaises(UnknownProcessor):
            resolve_tdp(self.ds, "")


if __name__ == "__main__":
    unittest.main()
