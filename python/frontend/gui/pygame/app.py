"""Pygame GUI frontend, fully self-contained.

Includes main menu, mode selection, rules, gameplay and the game-over
screen.  The frame loop drives time mode through a ``ManualClock``.
"""

from __future__ import annotations

import enum

import pygame

from backend.engine.clock import ManualClock
from backend.engine.gameplay import GamePlay
from backend.engine.gamestate import GameState
from backend.engine.selection import Evaluation
from backend.models.block import GameMode, GameStatus

# ---------------------------------------------------------------------------
# Catppuccin Mocha palette
# ---------------------------------------------------------------------------
COL_BASE = (30, 30, 46)
COL_MANTLE = (24, 24, 37)
COL_SURFACE0 = (49, 50, 68)
COL_SURFACE1 = (69, 71, 90)
COL_OVERLAY0 = (108, 112, 134)
COL_TEXT = (205, 214, 244)
COL_SUBTEXT = (166, 173, 200)
COL_BLUE = (137, 180, 250)
COL_LAVENDER = (180, 190, 254)
COL_GREEN = (166, 227, 161)
COL_PINK = (245, 194, 231)
COL_YELLOW = (249, 226, 175)
COL_RED = (243, 139, 168)

# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------
WIN_W, WIN_H = 460, 720
TILE_GAP = 6
MARGIN = 20
BOARD_TOP = 130
FPS = 60


# ---------------------------------------------------------------------------
# Screen enum
# ---------------------------------------------------------------------------
class _Screen(enum.Enum):
    MENU = "menu"
    HELP = "help"
    PLAYING = "playing"
    GAMEOVER = "gameover"


# ---------------------------------------------------------------------------
# Simple clickable button
# ---------------------------------------------------------------------------
class _Btn:
    __slots__ = ("rect", "text", "font", "bg", "hover", "fg", "radius", "_hot")

    def __init__(
        self,
        rect: tuple[int, int, int, int],
        text: str,
        font: pygame.font.Font,
        *,
        bg: tuple = COL_SURFACE0,
        hover: tuple = COL_SURFACE1,
        fg: tuple = COL_TEXT,
        radius: int = 8,
    ) -> None:
        self.rect = pygame.Rect(rect)
        self.text = text
        self.font = font
        self.bg = bg
        self.hover = hover
        self.fg = fg
        self.radius = radius
        self._hot = False

    def draw(self, surf: pygame.Surface) -> None:
        c = self.hover if self._hot else self.bg
        pygame.draw.rect(surf, c, self.rect, border_radius=self.radius)
        lbl = self.font.render(self.text, True, self.fg)
        surf.blit(
            lbl,
            (
                self.rect.centerx - lbl.get_width() // 2,
                self.rect.centery - lbl.get_height() // 2,
            ),
        )

    def motion(self, pos: tuple[int, int]) -> None:
        self._hot = self.rect.collidepoint(pos)

    def hit(self, pos: tuple[int, int]) -> bool:
        return self.rect.collidepoint(pos)


# ---------------------------------------------------------------------------
# Centring helpers
# ---------------------------------------------------------------------------
def _cx(w: int) -> int:
    return (WIN_W - w) // 2


def _blit_center(surf: pygame.Surface, rendered: pygame.Surface, y: int) -> None:
    surf.blit(rendered, (_cx(rendered.get_width()), y))


# ---------------------------------------------------------------------------
# Main application
# ---------------------------------------------------------------------------
class PygameApp:
    def __init__(self, game: GamePlay, mode: GameMode | None = None) -> None:
        if not isinstance(game.clock, ManualClock):
            raise ValueError("The pygame frontend needs a GamePlay with a ManualClock.")
        self._game = game
        self._clock_src: ManualClock = game.clock
        self._wrong_until: int | None = None

        pygame.init()
        self._surf = pygame.display.set_mode((WIN_W, WIN_H))
        pygame.display.set_caption("Sum Stack")
        self._clock = pygame.time.Clock()

        # Fonts
        self._f_big = pygame.font.SysFont("Helvetica", 38, bold=True)
        self._f_target = pygame.font.SysFont("Helvetica", 44, bold=True)
        self._f_title = pygame.font.SysFont("Helvetica", 22, bold=True)
        self._f_body = pygame.font.SysFont("Helvetica", 16)
        self._f_btn = pygame.font.SysFont("Helvetica", 17, bold=True)
        self._f_btn_sm = pygame.font.SysFont("Helvetica", 14, bold=True)
        self._f_small = pygame.font.SysFont("Helvetica", 13)
        self._f_tile = pygame.font.SysFont("Helvetica", 22, bold=True)

        self._screen = _Screen.MENU
        self._build_menu_btns()
        self._build_game_btns()
        self._build_over_btns()
        self._help_back = _Btn((_cx(180), WIN_H - 80, 180, 46), "B A C K", self._f_btn_sm)

        if mode is not None:
            self._start_game(mode)

    # ── buttons ─────────────────────────────────────────────────────────────

    def _build_menu_btns(self) -> None:
        bw = 240
        self._classic_btn = _Btn(
            (_cx(bw), 280, bw, 52), "C L A S S I C", self._f_btn,
            bg=COL_BLUE, hover=COL_LAVENDER, fg=COL_BASE,
        )
        self._time_btn = _Btn(
            (_cx(bw), 346, bw, 52), "T I M E", self._f_btn,
            bg=COL_YELLOW, hover=(255, 240, 200), fg=COL_BASE,
        )
        self._help_btn = _Btn((_cx(bw), 420, bw, 42), "HOW TO PLAY", self._f_btn_sm)
        self._quit_btn = _Btn(
            (_cx(bw), 476, bw, 42), "Q U I T", self._f_btn_sm,
            bg=COL_RED, hover=(255, 170, 185), fg=COL_BASE,
        )
        self._menu_all = [self._classic_btn, self._time_btn, self._help_btn, self._quit_btn]

    def _build_game_btns(self) -> None:
        bw, gap = 120, 10
        sx = _cx(3 * bw + 2 * gap)
        y = WIN_H - 56
        self._pause_btn = _Btn((sx, y, bw, 38), "PAUSE (P)", self._f_btn_sm)
        self._clear_btn = _Btn(
            (sx + bw + gap, y, bw, 38), "CLEAR (C)", self._f_btn_sm,
            bg=COL_PINK, hover=(245, 210, 227), fg=COL_BASE,
        )
        self._home_btn = _Btn((sx + 2 * (bw + gap), y, bw, 38), "HOME (M)", self._f_btn_sm)
        self._game_btns = [self._pause_btn, self._clear_btn, self._home_btn]

    def _build_over_btns(self) -> None:
        bw = 220
        self._retry_btn = _Btn(
            (_cx(bw), 420, bw, 50), "TRY AGAIN", self._f_btn,
            bg=COL_GREEN, hover=(190, 240, 190), fg=COL_BASE,
        )
        self._over_menu = _Btn((_cx(bw), 488, bw, 46), "M E N U", self._f_btn_sm)

    # ── helpers ─────────────────────────────────────────────────────────────

    def _tile_layout(self) -> tuple[int, int, int]:
        """Return (tile_px, origin_x, origin_y) for the board."""
        cfg = self._game.config
        avail_w = WIN_W - 2 * MARGIN
        avail_h = WIN_H - BOARD_TOP - 80
        tile_px = min(
            (avail_w - (cfg.grid_cols - 1) * TILE_GAP) // cfg.grid_cols,
            (avail_h - (cfg.grid_rows_max - 1) * TILE_GAP) // cfg.grid_rows_max,
        )
        board_w = cfg.grid_cols * tile_px + (cfg.grid_cols - 1) * TILE_GAP
        return tile_px, _cx(board_w), BOARD_TOP

    def _tile_rect(self, row: int, col: int) -> pygame.Rect:
        # Row 0 sits at the bottom of the board.
        tpx, ox, oy = self._tile_layout()
        top_row = self._game.config.grid_rows_max - 1
        return pygame.Rect(
            ox + col * (tpx + TILE_GAP),
            oy + (top_row - row) * (tpx + TILE_GAP),
            tpx,
            tpx,
        )

    # ── drawing ─────────────────────────────────────────────────────────────

    def _draw_menu(self, state: GameState) -> None:
        self._surf.fill(COL_BASE)
        _blit_center(self._surf, self._f_big.render("SUM  STACK", True, COL_TEXT), 100)
        _blit_center(
            self._surf,
            self._f_body.render("Pick tiles that add up to the target", True, COL_SUBTEXT),
            160,
        )
        _blit_center(
            self._surf,
            self._f_title.render(f"Best: {state.high_score}", True, COL_YELLOW),
            214,
        )
        for btn in self._menu_all:
            btn.draw(self._surf)

    def _draw_help(self, state: GameState) -> None:
        self._surf.fill(COL_BASE)
        _blit_center(self._surf, self._f_big.render("HOW TO PLAY", True, COL_TEXT), 60)
        lines = [
            ("Click tiles whose numbers add up to the target.", COL_TEXT),
            ("Going over the target clears your selection.", COL_TEXT),
            ("", COL_TEXT),
            ("Classic: a new row after every clear.", COL_BLUE),
            ("Time: a new row whenever the countdown ends;", COL_YELLOW),
            ("seconds left are added to each clear.", COL_YELLOW),
            ("", COL_TEXT),
            ("The game ends when the stack hits the top.", COL_RED),
        ]
        y = 150
        for text, col in lines:
            if text:
                _blit_center(self._surf, self._f_body.render(text, True, col), y)
            y += 30
        self._help_back.draw(self._surf)

    def _draw_game(self, state: GameState) -> None:
        self._surf.fill(COL_BASE)
        cfg = self._game.config

        # header
        _blit_center(
            self._surf,
            self._f_target.render(str(state.target_sum), True, COL_GREEN),
            14,
        )
        sum_col = COL_RED if state.is_wrong else COL_PINK
        _blit_center(
            self._surf,
            self._f_body.render(
                f"Selected {state.selected_sum}    Score {state.score}    "
                f"Best {state.high_score}",
                True,
                sum_col,
            ),
            70,
        )

        # countdown bar
        if state.mode == GameMode.TIME:
            bar_w = WIN_W - 2 * MARGIN
            frac = max(0.0, min(1.0, state.time_left / cfg.time_limit))
            pygame.draw.rect(
                self._surf, COL_SURFACE0,
                pygame.Rect(MARGIN, 100, bar_w, 10), border_radius=5,
            )
            pygame.draw.rect(
                self._surf,
                COL_YELLOW if state.time_left > 3 else COL_RED,
                pygame.Rect(MARGIN, 100, int(bar_w * frac), 10),
                border_radius=5,
            )

        # board background, one slot per cell
        for r in range(cfg.grid_rows_max):
            for c in range(cfg.grid_cols):
                pygame.draw.rect(
                    self._surf, COL_MANTLE, self._tile_rect(r, c), border_radius=6
                )

        # blocks
        selected = set(state.selected_ids)
        for block in state.blocks:
            if block.row >= cfg.grid_rows_max:
                continue
            rect = self._tile_rect(block.row, block.col)
            if block.id in selected:
                col = COL_RED if state.is_wrong else COL_GREEN
            else:
                col = COL_BLUE
            pygame.draw.rect(self._surf, col, rect, border_radius=6)
            lbl = self._f_tile.render(str(block.value), True, COL_BASE)
            self._surf.blit(
                lbl,
                (
                    rect.centerx - lbl.get_width() // 2,
                    rect.centery - lbl.get_height() // 2,
                ),
            )

        if state.status == GameStatus.PAUSED:
            veil = pygame.Surface((WIN_W, WIN_H), pygame.SRCALPHA)
            veil.fill((0, 0, 0, 150))
            self._surf.blit(veil, (0, 0))
            _blit_center(
                self._surf, self._f_big.render("PAUSED", True, COL_TEXT), WIN_H // 2 - 40
            )

        self._pause_btn.text = (
            "RESUME (P)" if state.status == GameStatus.PAUSED else "PAUSE (P)"
        )
        for btn in self._game_btns:
            btn.draw(self._surf)

    def _draw_gameover(self, state: GameState) -> None:
        self._surf.fill(COL_BASE)
        _blit_center(
            self._surf,
            self._f_big.render("G A M E   O V E R", True, COL_RED),
            110,
        )
        info = [
            (f"Mode:   {state.mode.value}", COL_SUBTEXT),
            (f"Score:  {state.score}", COL_YELLOW),
            (f"Best:   {state.high_score}", COL_YELLOW),
        ]
        y = 200
        for txt, col in info:
            _blit_center(self._surf, self._f_title.render(txt, True, col), y)
            y += 44
        if state.score and state.score >= state.high_score:
            _blit_center(
                self._surf,
                self._f_title.render("★  New best!  ★", True, COL_GREEN),
                y + 10,
            )
        self._retry_btn.draw(self._surf)
        self._over_menu.draw(self._surf)

    # ── event handling ──────────────────────────────────────────────────────

    def _ev_menu(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            for b in self._menu_all:
                b.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._classic_btn.hit(ev.pos):
                self._start_game(GameMode.CLASSIC)
            elif self._time_btn.hit(ev.pos):
                self._start_game(GameMode.TIME)
            elif self._help_btn.hit(ev.pos):
                self._screen = _Screen.HELP
            elif self._quit_btn.hit(ev.pos):
                return False
        elif ev.type == pygame.KEYDOWN:
            if ev.key in (pygame.K_1, pygame.K_RETURN):
                self._start_game(GameMode.CLASSIC)
            elif ev.key == pygame.K_2:
                self._start_game(GameMode.TIME)
            elif ev.key == pygame.K_h:
                self._screen = _Screen.HELP
            elif ev.key in (pygame.K_q, pygame.K_ESCAPE):
                return False
        return True

    def _ev_help(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._help_back.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._help_back.hit(ev.pos):
                self._screen = _Screen.MENU
        elif ev.type == pygame.KEYDOWN:
            self._screen = _Screen.MENU
        return True

    def _ev_game(self, ev: pygame.event.Event) -> bool:
        game = self._game
        if ev.type == pygame.MOUSEMOTION:
            for btn in self._game_btns:
                btn.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._pause_btn.hit(ev.pos):
                game.toggle_pause()
            elif self._clear_btn.hit(ev.pos):
                self._clear()
            elif self._home_btn.hit(ev.pos):
                self._go_home()
            else:
                self._click_tile(ev.pos)
        elif ev.type == pygame.KEYDOWN:
            if ev.key in (pygame.K_p, pygame.K_SPACE):
                game.toggle_pause()
            elif ev.key == pygame.K_c:
                self._clear()
            elif ev.key in (pygame.K_m, pygame.K_ESCAPE):
                self._go_home()
        return True

    def _ev_gameover(self, ev: pygame.event.Event) -> bool:
        if ev.type == pygame.MOUSEMOTION:
            self._retry_btn.motion(ev.pos)
            self._over_menu.motion(ev.pos)
        elif ev.type == pygame.MOUSEBUTTONDOWN and ev.button == 1:
            if self._retry_btn.hit(ev.pos):
                self._retry()
            elif self._over_menu.hit(ev.pos):
                self._go_home()
        elif ev.type == pygame.KEYDOWN:
            if ev.key in (pygame.K_r, pygame.K_RETURN):
                self._retry()
            elif ev.key in (pygame.K_m, pygame.K_ESCAPE):
                self._go_home()
        return True

    # ── game actions ────────────────────────────────────────────────────────

    def _click_tile(self, pos: tuple[int, int]) -> None:
        for block in self._game.snapshot().blocks:
            if self._tile_rect(block.row, block.col).collidepoint(pos):
                result = self._game.toggle_block(block.id)
                if result == Evaluation.OVERSHOOT:
                    flash_ms = int(self._game.config.overshoot_flash * 1000)
                    self._wrong_until = pygame.time.get_ticks() + flash_ms
                return

    def _clear(self) -> None:
        self._wrong_until = None
        self._game.clear_selection()

    def _start_game(self, mode: GameMode) -> None:
        self._wrong_until = None
        self._game.start(mode)
        self._screen = _Screen.PLAYING

    def _retry(self) -> None:
        self._wrong_until = None
        self._game.retry()
        self._screen = _Screen.PLAYING

    def _go_home(self) -> None:
        self._wrong_until = None
        self._game.return_home()
        self._screen = _Screen.MENU

    def _update(self, dt_ms: int) -> None:
        """Advance timers by one frame."""
        if self._wrong_until is not None and pygame.time.get_ticks() >= self._wrong_until:
            self._wrong_until = None
            self._game.resolve_overshoot()
        self._clock_src.advance(dt_ms / 1000)
        if self._screen == _Screen.PLAYING and self._game.is_over:
            self._screen = _Screen.GAMEOVER

    # ── main loop ───────────────────────────────────────────────────────────

    def run_loop(self) -> None:
        _dispatch = {
            _Screen.MENU: self._ev_menu,
            _Screen.HELP: self._ev_help,
            _Screen.PLAYING: self._ev_game,
            _Screen.GAMEOVER: self._ev_gameover,
        }
        _draw = {
            _Screen.MENU: self._draw_menu,
            _Screen.HELP: self._draw_help,
            _Screen.PLAYING: self._draw_game,
            _Screen.GAMEOVER: self._draw_gameover,
        }

        running = True
        dt = 0
        while running:
            for ev in pygame.event.get():
                if ev.type == pygame.QUIT:
                    running = False
                    break
                handler = _dispatch.get(self._screen)
                if handler and not handler(ev):
                    running = False
                    break

            self._update(dt)

            drawer = _draw.get(self._screen)
            if drawer:
                drawer(self._game.snapshot())
            pygame.display.flip()
            dt = self._clock.tick(FPS)

        self._game.return_home()
        pygame.quit()


# ---------------------------------------------------------------------------
# Public entry point
# ---------------------------------------------------------------------------
def make_clock() -> ManualClock:
    return ManualClock()


def run(game: GamePlay, mode: GameMode | None = None) -> None:
    """Launch the Pygame GUI (opens to the menu unless *mode* is given)."""
    app = PygameApp(game, mode)
    app.run_loop()
