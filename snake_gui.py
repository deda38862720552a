# Tkinter player window: board canvas, controls, score display and session chart.
from __future__ import annotations

import logging
import os

# Keep matplotlib cache local for environments without writable home config.
LOCAL_MPLCONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)), ".mplconfig")
os.makedirs(LOCAL_MPLCONFIG, exist_ok=True)
os.environ.setdefault("MPLCONFIGDIR", LOCAL_MPLCONFIG)

import matplotlib.pyplot as plt
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg
import tkinter as tk
from tkinter import messagebox

from game_logic import (
    MAX_CELL_SIZE,
    MAX_GRID_SIZE,
    MAX_OBSTACLES,
    MIN_CELL_SIZE,
    MIN_GRID_SIZE,
    GameStatus,
    SnakeConfig,
    SnakeGame,
)
from game_loop import GameLoop
from utils import cell_rect, chunked_mean, direction_for_key, score_summary

logger = logging.getLogger(__name__)


class SnakeApp:
    """Tkinter presentation layer for SnakeGame."""
    BG = "#101418"
    BOARD_BG = "#ffffff"
    SIDEBAR_BG = "#0f1720"
    OBSTACLE_COLOR = "#808080"
    SNAKE_COLOR = "#4CAF50"
    FOOD_COLOR = "#FF0000"
    OVERLAY_TEXT = "#000000"
    TEXT_PRIMARY = "#e6eef7"
    TEXT_MUTED = "#95a4b8"
    ACCENT = "#42c4ff"

    LABEL_READY = "Start"
    LABEL_PLAYING = "Playing"
    LABEL_RESTART = "Restart"
    CHART_CHUNK = 5

    def __init__(self, root: tk.Tk, config: SnakeConfig | None = None) -> None:
        self.root = root
        self.root.title("Snake")
        self.root.configure(bg=self.BG)

        self.config = config if config is not None else SnakeConfig()
        self.game = SnakeGame(self.config)
        self.loop = self._make_loop()
        self.session_scores: list[float] = []

        self._build_layout()
        self._bind_keys()
        self._apply_canvas_size()
        self.draw(self.game)
        self._update_plot()
        self.root.protocol("WM_DELETE_WINDOW", self._on_close)

    def _make_loop(self) -> GameLoop:
        return GameLoop(
            self.game,
            schedule=self.root.after,
            cancel=self.root.after_cancel,
            on_frame=self.draw,
            on_score=self._show_score,
            on_game_over=self._on_game_over,
        )

    def _build_layout(self) -> None:
        """Create game canvas + right sidebar panels."""
        container = tk.Frame(self.root, bg=self.BG)
        container.pack(fill="both", expand=True, padx=16, pady=16)

        self.canvas = tk.Canvas(container, bg=self.BOARD_BG, highlightthickness=0, bd=0)
        self.canvas.pack(side="left", anchor="n", padx=(0, 16))

        self.sidebar = tk.Frame(container, bg=self.SIDEBAR_BG, width=340)
        self.sidebar.pack(side="right", fill="y")

        tk.Label(
            self.sidebar,
            text="Snake",
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            font=("Helvetica", 16, "bold"),
        ).pack(anchor="w", padx=16, pady=(16, 10))

        self._build_status()
        self._build_controls()
        self._build_buttons()
        self._build_chart()

    def _build_status(self) -> None:
        frame = tk.LabelFrame(
            self.sidebar,
            text="Status",
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            bd=1,
            font=("Helvetica", 10, "bold"),
            labelanchor="n",
        )
        frame.pack(fill="x", padx=16, pady=(0, 12))

        self.score_var = tk.StringVar(value="Score: 0")
        self.speed_var = tk.StringVar(value=f"Speed: {self.game.speed_ms} ms")
        self.state_var = tk.StringVar(value="State: Ready")

        for var in (self.score_var, self.speed_var, self.state_var):
            tk.Label(
                frame,
                textvariable=var,
                fg=self.TEXT_PRIMARY,
                bg=self.SIDEBAR_BG,
                font=("Helvetica", 11),
                anchor="w",
            ).pack(fill="x", padx=10, pady=3)

    def _build_controls(self) -> None:
        """Settings that rebuild the game when applied."""
        frame = tk.LabelFrame(
            self.sidebar,
            text="Settings",
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            bd=1,
            font=("Helvetica", 10, "bold"),
            labelanchor="n",
        )
        frame.pack(fill="x", padx=16, pady=(0, 12))

        self.width_var = tk.StringVar(value=str(self.config.grid_width))
        self.height_var = tk.StringVar(value=str(self.config.grid_height))
        self.cell_size_var = tk.StringVar(value=str(self.config.cell_size))
        self.obstacles_var = tk.StringVar(value=str(self.config.obstacle_count))

        self._add_labeled_spinbox(frame, "Grid Width", self.width_var, MIN_GRID_SIZE, MAX_GRID_SIZE)
        self._add_labeled_spinbox(frame, "Grid Height", self.height_var, MIN_GRID_SIZE, MAX_GRID_SIZE)
        self._add_labeled_spinbox(frame, "Cell Size", self.cell_size_var, MIN_CELL_SIZE, MAX_CELL_SIZE)
        self._add_labeled_spinbox(frame, "Obstacles", self.obstacles_var, 0, MAX_OBSTACLES)

    def _add_labeled_spinbox(self, parent: tk.Widget, label: str, var: tk.StringVar, low: int, high: int) -> None:
        row = tk.Frame(parent, bg=self.SIDEBAR_BG)
        row.pack(fill="x", padx=10, pady=3)

        tk.Label(
            row,
            text=label,
            fg=self.TEXT_PRIMARY,
            bg=self.SIDEBAR_BG,
            font=("Helvetica", 10),
        ).pack(side="left")

        tk.Spinbox(
            row,
            from_=low,
            to=high,
            textvariable=var,
            width=8,
            justify="center",
            bd=0,
            relief="flat",
            bg="#e8eef5",
            fg="#1a2734",
            font=("Helvetica", 10),
        ).pack(side="right")

    def _build_buttons(self) -> None:
        frame = tk.Frame(self.sidebar, bg=self.SIDEBAR_BG)
        frame.pack(fill="x", padx=16, pady=(0, 8))

        self.start_btn = self._button(frame, self.LABEL_READY, self.start_game)
        self.start_btn.pack(fill="x", pady=4)

        self.apply_btn = self._button(frame, "Apply Settings", self.apply_settings)
        self.apply_btn.pack(fill="x", pady=4)

        tk.Label(
            self.sidebar,
            text="Move: Arrow keys / WASD",
            fg=self.TEXT_MUTED,
            bg=self.SIDEBAR_BG,
            font=("Helvetica", 10),
        ).pack(anchor="w", padx=16, pady=(4, 8))

    def _button(self, parent: tk.Widget, text: str, command) -> tk.Button:
        return tk.Button(
            parent,
            text=text,
            command=command,
            fg="#09141f",
            bg=self.ACCENT,
            activebackground="#74d8ff",
            activeforeground="#09141f",
            bd=0,
            relief="flat",
            font=("Helvetica", 11, "bold"),
            padx=12,
            pady=8,
            cursor="hand2",
        )

    def _build_chart(self) -> None:
        """Session score chart; lives only as long as the window."""
        fig = plt.Figure(figsize=(3.4, 2.6), dpi=100) #type: ignore
        self.ax_scores = fig.add_subplot(111)
        fig.subplots_adjust(left=0.18, bottom=0.2)
        self.plot_canvas = FigureCanvasTkAgg(fig, master=self.sidebar)
        self.plot_canvas.get_tk_widget().pack(fill="both", expand=True, padx=16, pady=(0, 16))

        self.summary_var = tk.StringVar(value="")
        tk.Label(
            self.sidebar,
            textvariable=self.summary_var,
            fg=self.TEXT_MUTED,
            bg=self.SIDEBAR_BG,
            font=("Helvetica", 9),
            anchor="w",
        ).pack(fill="x", padx=16, pady=(0, 12))

    def _bind_keys(self) -> None:
        """Route every key press through the direction map; unknown keys do nothing."""
        self.root.bind("<KeyPress>", self._on_key)

    def _on_key(self, event: tk.Event) -> None:
        direction = direction_for_key(event.keysym)
        if direction is not None:
            self.game.set_direction(direction)

    def _parse_int(self, raw: str, low: int, high: int, label: str) -> int:
        try:
            value = int(raw)
        except ValueError:
            raise ValueError(f"{label} must be an integer.")
        if not (low <= value <= high):
            raise ValueError(f"{label} must be between {low} and {high}.")
        return value

    def apply_settings(self) -> None:
        """Validate sidebar values, then rebuild the game with new config."""
        try:
            config = SnakeConfig(
                grid_width=self._parse_int(self.width_var.get(), MIN_GRID_SIZE, MAX_GRID_SIZE, "Grid width"),
                grid_height=self._parse_int(self.height_var.get(), MIN_GRID_SIZE, MAX_GRID_SIZE, "Grid height"),
                cell_size=self._parse_int(self.cell_size_var.get(), MIN_CELL_SIZE, MAX_CELL_SIZE, "Cell size"),
                obstacle_count=self._parse_int(self.obstacles_var.get(), 0, MAX_OBSTACLES, "Obstacles"),
                seed=self.config.seed,
            )
            config.validate()
        except ValueError as exc:
            messagebox.showerror("Invalid Setting", str(exc))
            return

        self.loop.stop()
        self.config = config
        self.game = SnakeGame(self.config)
        self.loop = self._make_loop()
        self._apply_canvas_size()
        self.start_btn.configure(text=self.LABEL_READY)
        self.state_var.set("State: Ready")
        self._show_score(self.game.score)
        self.draw(self.game)

    def _apply_canvas_size(self) -> None:
        """Resize board canvas to match current grid + tile size."""
        self.canvas.configure(
            width=self.config.grid_width * self.config.cell_size,
            height=self.config.grid_height * self.config.cell_size,
        )

    def start_game(self) -> None:
        """Start a fresh game; a running game is replaced."""
        self.start_btn.configure(text=self.LABEL_PLAYING)
        self.state_var.set("State: Running")
        self.loop.start()

    def _show_score(self, score: int) -> None:
        self.score_var.set(f"Score: {score}")

    def _on_game_over(self, game: SnakeGame) -> None:
        self.start_btn.configure(text=self.LABEL_RESTART)
        self.state_var.set("State: Game Over")
        self.session_scores.append(float(game.score))
        self._update_plot()

    def _update_plot(self) -> None:
        self.ax_scores.clear()
        self.ax_scores.set_title("Session Scores", fontsize=9)
        self.ax_scores.set_xlabel("Game", fontsize=8)
        self.ax_scores.set_ylabel("Score", fontsize=8)
        self.ax_scores.grid(alpha=0.25)

        summary = score_summary(self.session_scores)
        if summary["games"]:
            self.summary_var.set(
                f"Games: {summary['games']} | Best: {summary['best']:.0f} | "
                f"Mean: {summary['mean']:.1f} | Median: {summary['median']:.1f}"
            )
        else:
            self.summary_var.set("No finished games yet")

        if not self.session_scores:
            self.plot_canvas.draw_idle()
            return

        games = range(1, len(self.session_scores) + 1)
        self.ax_scores.bar(games, self.session_scores, color="#44b5a4", alpha=0.85)
        x_end, means = chunked_mean(self.session_scores, chunk_size=self.CHART_CHUNK)
        if x_end.size > 0:
            self.ax_scores.plot(
                x_end,
                means,
                color="#1f77b4",
                linewidth=1.8,
                marker="o",
                markersize=3,
                label=f"Average per {self.CHART_CHUNK} games",
            )
            self.ax_scores.legend(loc="upper left", fontsize=7)
        self.plot_canvas.draw_idle()

    def draw(self, game: SnakeGame) -> None:
        """Render obstacles, snake, food, then the game-over overlay."""
        snapshot = game.snapshot()
        cell = snapshot["cell_size"]
        self.canvas.delete("all")

        for x, y in snapshot["obstacles"]:
            self.canvas.create_rectangle(*cell_rect(x, y, cell), fill=self.OBSTACLE_COLOR, outline="")

        for x, y in snapshot["snake"]:
            self.canvas.create_rectangle(*cell_rect(x, y, cell), fill=self.SNAKE_COLOR, outline="")

        if snapshot["food"] is not None:
            fx, fy = snapshot["food"]
            self.canvas.create_rectangle(*cell_rect(fx, fy, cell), fill=self.FOOD_COLOR, outline="")

        self.speed_var.set(f"Speed: {snapshot['speed_ms']} ms")

        if snapshot["status"] is GameStatus.OVER:
            self.canvas.create_text(
                snapshot["width"] * cell // 2,
                snapshot["height"] * cell // 2,
                text="Game Over!",
                fill=self.OVERLAY_TEXT,
                font=("Arial", 30),
            )

    def _on_close(self) -> None:
        self.loop.stop()
        self.root.destroy()


def run_player_gui(config: SnakeConfig | None = None) -> None:
    """Launch the Snake player window."""
    root = tk.Tk()
    SnakeApp(root, config)
    logger.info("Window opened")
    root.mainloop()


if __name__ == "__main__":
    run_player_gui()
