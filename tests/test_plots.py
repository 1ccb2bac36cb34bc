import matplotlib.pyplot as plt

from ivprimer import load_malaria_data, monte_carlo
from ivprimer.plots import jitter_plot, monte_carlo_plot, save_figure


class TestJitterPlot:
    def test_one_scatter_per_arm(self):
        fig = jitter_plot(load_malaria_data(), seed=0)
        ax = fig.axes[0]
        assert len(ax.collections) == 2
        assert sum(len(c.get_offsets()) for c in ax.collections) == 1000
        plt.close(fig)

    def test_save_figure_writes_png(self, tmp_path):
        path = save_figure(jitter_plot(load_malaria_data()), tmp_path / "sub" / "plot.png")
        assert path.exists()
        assert path.stat().st_size > 0


class TestMonteCarloPlot:
    def test_histograms_and_reference_lines(self, tmp_path):
        draws = monte_carlo(n_sims=10, n=200, seed=1)
        fig = monte_carlo_plot(draws, beta=1.0)
        ax = fig.axes[0]
        assert len(ax.lines) == 2
        labels = [t.get_text() for t in ax.get_legend().get_texts()]
        assert any("weak instrument" in label for label in labels)
        save_figure(fig, tmp_path / "mc.png")
