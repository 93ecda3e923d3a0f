# main.py

import json
import logging
import threading
import pygame
import constants
import logger_setup
import renderer
from scheduler import TickScheduler
from spawn_settings import SpawnSettings
from vector import Vector2
from world import World, CapacityExceeded

# Get the application's dedicated logger
logger = logging.getLogger("simple_space")


def launch_velocity(start, end, viewport) -> Vector2:
    """
    The initial kick for a body thrown from start towards end: the drag vector
    scaled down by half the viewport perimeter. The vector clamps the result.
    """
    scale = viewport[0] + viewport[1]
    return Vector2((end[0] - start[0]) / scale, (end[1] - start[1]) / scale)


def is_blocked(world: World, point, panel_rect, panel_visible: bool) -> bool:
    """True if point lies on a body or on the visible settings panel."""
    if world.contains_point(point):
        return True
    return panel_visible and panel_rect.collidepoint(point)


def run_event_loop(world, settings, screen, clock, font, repaint):
    """
    The interactive loop. Translates input into spawns and settings changes
    and redraws whenever the world reports a change or the user is aiming.
    Physics runs elsewhere; this loop never ticks the world itself.
    """
    running = True
    aim_start = None
    panel_visible = False
    viewport = screen.get_size()

    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    panel_visible = not panel_visible
                elif event.key == pygame.K_g:
                    world.toggle_gravity()
                elif event.key == pygame.K_UP:
                    settings.adjust_radius(1)
                elif event.key == pygame.K_DOWN:
                    settings.adjust_radius(-1)
                elif event.key == pygame.K_RIGHT:
                    settings.adjust_mass(1)
                elif event.key == pygame.K_LEFT:
                    settings.adjust_mass(-1)
                repaint.set()

            elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                blocked = is_blocked(world, event.pos, renderer.panel_rect(screen), panel_visible)
                if not blocked and not world.is_full():
                    aim_start = event.pos

            elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                if aim_start is not None and not is_blocked(world, aim_start, renderer.panel_rect(screen), panel_visible):
                    radius = settings.radius
                    position = (aim_start[0] - radius, aim_start[1] - radius)
                    try:
                        world.spawn(position, settings.mass, settings.diameter,
                                    launch=launch_velocity(aim_start, event.pos, viewport))
                    except CapacityExceeded as e:
                        logger.warning(f"Spawn rejected: {e}")
                aim_start = None
                repaint.set()

        # --- Drawing ---
        if repaint.is_set() or aim_start is not None:
            repaint.clear()
            panel_lines = settings.summary(world.is_gravity_enabled()) if panel_visible else None
            mouse_pos = pygame.mouse.get_pos() if pygame.mouse.get_focused() else None
            renderer.draw_frame(screen, font, world.bodies(), aim_start, mouse_pos, panel_lines)

        clock.tick(constants.FPS)


def main():
    """
    Main function to initialize and run the simulation window.
    """
    # --- Setup ---
    with open('config.json', 'r') as f:
        config = json.load(f)
    sim_config = config['simulation']

    logger_setup.setup_logging(config)
    logger.info("Application starting...")

    # --- Initialization ---
    pygame.init()
    screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT))
    pygame.display.set_caption(constants.TITLE)
    clock = pygame.time.Clock()
    font = pygame.font.Font(None, constants.PANEL_FONT_SIZE)

    world = World(sim_config)
    settings = SpawnSettings(sim_config)

    # The world signals every completed tick; the drawing loop picks it up.
    repaint = threading.Event()
    repaint.set()
    world.add_listener(repaint.set)

    scheduler = TickScheduler(world, screen.get_size, sim_config)
    scheduler.start()
    try:
        run_event_loop(world, settings, screen, clock, font, repaint)
    finally:
        scheduler.stop()
        logger.info("Application shutting down.")
        pygame.quit()


if __name__ == "__main__":
    main()
