import tempfile
import unittest
from pathlib import Path

try:
    import matplotlib
    matplotlib.use("Agg")
    import matplotlib.pyplot as plt
except ImportError:
    plt = None

import plotting


@unittest.skipIf(plt is None, "matplotlib not installed")
class TestPlotting(unittest.TestCase):
    def tearDown(self):
        plt.close("all")

    def test_topology_scaling_saved(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "scaling.png"
            fig = plotting.plot_topology_scaling(k_values=[4, 6, 8], save_path=path, show_plot=False)
            self.assertTrue(path.exists())
        self.assertEqual(len(fig.axes), 3)

    def test_cost_breakdown_saved(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "cost.png"
            fig = plotting.plot_cost_breakdown(k_values=[4, 8], save_path=path, show_plot=False)
            self.assertTrue(path.exists())
        self.assertEqual(len(fig.axes), 2)

    def test_figures_closed_when_not_shown(self):
        fig = plotting.plot_topology_scaling(k_values=[4, 8], show_plot=False)
        self.assertFalse(plt.fignum_exists(fig.number))
        fig = plotting.plot_cost_breakdown(k_values=[4, 8], show_plot=False)
        self.assertFalse(plt.fignum_exists(fig.number))

    def test_missing_matplotlib(self):
        original = plotting.MATPLOTLIB_AVAILABLE
        plotting.MATPLOTLIB_AVAILABLE = False
        try:
            with self.assertRaises(ImportError):
                plotting.plot_topology_scaling(show_plot=False)
        finally:
            plotting.MATPLOTLIB_AVAILABLE = original


if __name__ == "__main__":
    unittest.main()
