import contextlib
import io
import os
import tempfile
import unittest

try:
    import matplotlib
    matplotlib.use("Agg")
except ImportError:
    pass

import main


class TestMain(unittest.TestCase):
    def test_runs_end_to_end(self):
        cwd = os.getcwd()
        out = io.StringIO()
        with tempfile.TemporaryDirectory() as tmp:
            os.chdir(tmp)
            try:
                with contextlib.redirect_stdout(out):
                    main.main()
            finally:
                os.chdir(cwd)

        text = out.getvalue()
        self.assertIn("Connected 16 of 20 nodes", text)
        self.assertIn("4 dropped", text)
        self.assertIn("node-0 -> node-1: edge_0_0", text)
        self.assertIn("node-0 -> node-19: unresolved", text)
        self.assertIn("Analysis complete!", text)


if __name__ == "__main__":
    unittest.main()
