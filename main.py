from __future__ import annotations

import argparse
import logging
import random
import sys

import pygame

from config import load_config
from events import PURSUER_CAUGHT_EXPLORER, PURSUER_HACKING_STARTED, ROUND_STARTED, EventRecorder
import explorer
import protector
from rendering import draw_explorer, draw_hud, draw_network, draw_pursuer, pick_node, view_transform
from state import init_state, pause, resolve_encounter, resume, round_reset, tick

logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Neural infiltration debug viewer")
    parser.add_argument("--seed", type=int, default=None, help="network seed (random if omitted)")
    parser.add_argument("--simple", action="store_true", help="use the simplified main-path network")
    parser.add_argument("--log-level", default="INFO", help="logging level (DEBUG, INFO, ...)")
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pygame.init()
    cfg = load_config()
    screen = pygame.display.set_mode((cfg.width, cfg.height))
    pygame.display.set_caption("Neural Infiltration")
    font = pygame.font.SysFont(None, 18)

    current_seed = args.seed if args.seed is not None else random.randrange(1 << 30)
    logger.info("starting viewer seed=%s simple=%s", current_seed, args.simple)
    state = init_state(cfg, current_seed, simplified=args.simple)
    recorder = EventRecorder(state.bus, PURSUER_CAUGHT_EXPLORER, PURSUER_HACKING_STARTED, ROUND_STARTED)
    view = view_transform(cfg, state.graph)
    fog = True
    message = ""

    clock = pygame.time.Clock()
    running = True

    while running:
        dt = clock.tick(cfg.fps) / 1000.0
        tick(cfg, state, dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_p:
                    if state.pursuer.paused:
                        resume(cfg, state)
                    else:
                        pause(cfg, state)
                elif event.key == pygame.K_c:
                    resolve_encounter(cfg, state)
                elif event.key == pygame.K_r:
                    round_reset(cfg, state)
                elif event.key == pygame.K_u:
                    unlocked = protector.unlock_around_explorer(cfg, state)
                    message = f"unlocked {', '.join(unlocked) or 'nothing'}"
                elif event.key == pygame.K_v:
                    fog = not fog
                elif event.key == pygame.K_n:
                    current_seed = random.randrange(1 << 30)
                    state = init_state(cfg, current_seed, simplified=args.simple)
                    recorder = EventRecorder(state.bus, PURSUER_CAUGHT_EXPLORER, PURSUER_HACKING_STARTED, ROUND_STARTED)
                    view = view_transform(cfg, state.graph)
                    message = ""

            if event.type == pygame.MOUSEBUTTONDOWN:
                node_id = pick_node(cfg, state.graph, view, event.pos)
                if node_id is None:
                    continue
                if event.button == 1:
                    result = explorer.request_move(cfg, state, node_id)
                    if result == explorer.PUZZLE:
                        # the viewer has no puzzle overlay, so replay the stored solution
                        result = explorer.complete_crossing(cfg, state, state.puzzle.solution)
                    message = f"move {node_id}: {result}"
                elif event.button == 3:
                    result = protector.block_node(cfg, state, node_id)
                    message = f"block {node_id}: {result}"

        if recorder.events:
            message = ", ".join(f"{ev.kind} {ev.payload}" for ev in recorder.events[-1:])
            recorder.clear()

        screen.fill(cfg.background_color)
        draw_network(cfg, state, screen, view, fog)
        draw_explorer(cfg, state, screen, view)
        draw_pursuer(cfg, state, screen, view, fog)
        draw_hud(cfg, state, screen, font, [
            message,
            "LMB move  RMB block  U unlock  P pause  C resolve  R reset  N new  V fog",
        ])
        pygame.display.flip()

    pygame.quit()
    sys.exit()


if __name__ == "__main__":
    main()
