from __future__ import annotations

import json

import numpy as np

from gigsampler.cli.draw import draw_samples, main
from gigsampler.utils.config_parser import DEFAULT_CONFIG, DrawConfig, merge_overrides


def _single_run_dir(base):
    runs = [p for p in base.iterdir() if p.is_dir()]
    assert len(runs) == 1
    return runs[0]


def test_main_writes_artifacts(tmp_path):
    code = main(["-a", "1", "-b", "1", "-p", "0.5", "-n", "300", "--seed", "3",
                 "--outdir", str(tmp_path), "--name", "smoke"])
    assert code == 0

    run_dir = _single_run_dir(tmp_path)
    assert run_dir.name.startswith("smoke-")
    assert (run_dir / "resolved_config.yaml").exists()
    samples = np.load(run_dir / "samples.npy")
    assert samples.shape == (300,)
    assert np.all(samples > 0)

    summary = json.loads((run_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["regime"] == "ratio_no_shift"
    assert summary["n"] == 300
    assert summary["draws_per_sec"] > 0
    assert "moment_check" in summary


def test_main_with_config_and_overrides(tmp_path):
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text(
        "gig:\n  a: 2.0\n  b: 0.5\n  p: -2.0\noutput:\n  save_samples: false\n", encoding="utf-8"
    )
    out = tmp_path / "runs"
    code = main(["-c", str(cfg_path), "-o", "sampling.n=100", "validation.enabled=false",
                 "--outdir", str(out)])
    assert code == 0

    run_dir = _single_run_dir(out)
    assert not (run_dir / "samples.npy").exists()
    summary = json.loads((run_dir / "summary.json").read_text(encoding="utf-8"))
    assert summary["regime"] == "ratio_mode_shift"
    assert summary["params"]["p"] == -2.0
    assert "moment_check" not in summary


def test_main_reports_invalid_parameters(tmp_path, capsys):
    code = main(["-a", "-1", "-b", "1", "-p", "0.5", "--outdir", str(tmp_path)])
    assert code == 1
    assert "FATAL" in capsys.readouterr().err


def test_main_missing_config_file(tmp_path):
    assert main(["-c", str(tmp_path / "missing.yaml"), "--outdir", str(tmp_path)]) == 1


def test_draw_samples_is_seeded():
    cfg = DrawConfig.from_dict(merge_overrides(DEFAULT_CONFIG, {"sampling": {"n": 20, "seed": 5}}))
    np.testing.assert_array_equal(draw_samples(cfg), draw_samples(cfg))
