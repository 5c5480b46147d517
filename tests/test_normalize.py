import tempfile
import unittest
from pathlib import Path

from pdf_factory import make_pdf, read_markers, read_sizes

from pdf_merger.core.exceptions import OptimizationError
from pdf_merger.core.models import InputFile
from pdf_merger.engine.merge import merge_documents
from pdf_merger.engine.normalize import fit_scale, normalize_for_print
from pdf_merger.engine.ordering import reconcile

A4 = (595.0, 842.0)


def _input(path: Path) -> InputFile:
    return InputFile(filename=path.name, path=path, mime_type="application/pdf", size_bytes=path.stat().st_size)


class TestFitScale(unittest.TestCase):
    def test_pages_within_envelope_keep_scale(self):
        self.assertEqual(fit_scale(400, 600, A4), 1.0)
        self.assertEqual(fit_scale(595, 842, A4), 1.0)

    def test_oversized_pages_use_tightest_axis(self):
        self.assertAlmostEqual(fit_scale(600, 900, A4), 842 / 900)
        self.assertAlmostEqual(fit_scale(1190, 842, A4), 0.5)
        self.assertAlmostEqual(fit_scale(500, 1684, A4), 0.5)

    def test_never_enlarges(self):
        self.assertEqual(fit_scale(10, 10, A4), 1.0)

    def test_float_noise_past_envelope_is_not_rescaled(self):
        self.assertEqual(fit_scale(595.005, 842.0000001, A4), 1.0)
        self.assertLess(fit_scale(595.02, 842, A4), 1.0)


class TestNormalizeForPrint(unittest.TestCase):
    def setUp(self):
        self._td = tempfile.TemporaryDirectory()
        self.base = Path(self._td.name)

    def tearDown(self):
        self._td.cleanup()

    def assertSizesAlmostEqual(self, actual, expected):
        self.assertEqual(len(actual), len(expected))
        for (w0, h0), (w1, h1) in zip(actual, expected):
            self.assertAlmostEqual(w0, w1, places=3)
            self.assertAlmostEqual(h0, h1, places=3)

    def test_reordered_merge_scenario(self):
        a = make_pdf(self.base / "a.pdf", [(600, 900), (600, 900)], label="a")
        b = make_pdf(self.base / "b.pdf", [(400, 600)], label="b")

        ordered = reconcile([_input(a), _input(b)], ["b.pdf", "a.pdf"])
        artifact = merge_documents(ordered, self.base / "out")
        sizes = normalize_for_print(artifact.path, A4)

        self.assertEqual(len(sizes), 3)
        self.assertSizesAlmostEqual(read_sizes(artifact.path), sizes)
        self.assertEqual(sizes[0], (400, 600))
        scale = min(595 / 600, 842 / 900)
        for width, height in sizes[1:]:
            self.assertAlmostEqual(width, 600 * scale, places=2)
            self.assertAlmostEqual(height, 842, places=2)
            self.assertAlmostEqual(width / height, 600 / 900, places=4)

        markers = read_markers(artifact.path)
        self.assertIn(b"(b-1)", markers[0])
        self.assertIn(b"(a-1)", markers[1])
        self.assertIn(b"(a-2)", markers[2])

    def test_within_envelope_is_untouched(self):
        path = make_pdf(self.base / "small.pdf", [(400, 600), (595, 842)])
        before = path.read_bytes()

        sizes = normalize_for_print(path, A4)

        self.assertEqual(sizes, [(400, 600), (595, 842)])
        self.assertEqual(path.read_bytes(), before)

    def test_is_idempotent(self):
        path = make_pdf(self.base / "big.pdf", [(1190, 1684), (300, 300)])
        first = normalize_for_print(path, A4)
        after_first = path.read_bytes()
        second = normalize_for_print(path, A4)

        self.assertSizesAlmostEqual(first, second)
        self.assertEqual(path.read_bytes(), after_first)

    def test_dimensions_never_grow(self):
        original = [(2000, 500), (100, 3000), (50, 50)]
        path = make_pdf(self.base / "mixed.pdf", original)
        sizes = normalize_for_print(path, A4)
        for (w0, h0), (w1, h1) in zip(original, sizes):
            self.assertLessEqual(w1, w0 + 1e-6)
            self.assertLessEqual(h1, h0 + 1e-6)
            self.assertLessEqual(w1, A4[0] + 0.01)
            self.assertLessEqual(h1, A4[1] + 0.01)

    def test_failure_keeps_original_file(self):
        path = self.base / "broken.pdf"
        path.write_bytes(b"garbage that is not a pdf")

        with self.assertRaises(OptimizationError):
            normalize_for_print(path, A4)
        self.assertEqual(path.read_bytes(), b"garbage that is not a pdf")
        self.assertEqual([p.name for p in self.base.iterdir()], ["broken.pdf"])
