# renderer.py

import pygame
import constants


def draw_bodies(screen: pygame.Surface, bodies):
    """
    Draws each body snapshot as a filled circle in its density color. The
    snapshot position is the bounding-box origin, so the circle is drawn in
    the box it defines.
    """
    for body in bodies:
        rect = pygame.Rect(int(body.x), int(body.y), body.diameter, body.diameter)
        pygame.draw.ellipse(screen, body.color, rect)


def draw_aim(screen: pygame.Surface, start, mouse_pos):
    """Draws the aiming circle around the press point and a line to the pointer."""
    radius = constants.AIM_DIAMETER // 2
    pygame.draw.circle(screen, constants.RED, start, radius, width=1)
    if mouse_pos is not None:
        pygame.draw.line(screen, constants.RED, start, mouse_pos)


def panel_rect(screen: pygame.Surface) -> pygame.Rect:
    width, height = screen.get_size()
    return pygame.Rect(width - constants.PANEL_WIDTH, 0, constants.PANEL_WIDTH, height)


def draw_panel(screen: pygame.Surface, font: pygame.font.Font, lines):
    """Draws the settings panel along the right edge of the window."""
    rect = panel_rect(screen)
    pygame.draw.rect(screen, constants.PANEL_COLOR, rect)
    y = rect.top + 10
    for line in lines:
        if line:
            text = font.render(line, True, constants.WHITE)
            screen.blit(text, (rect.left + 10, y))
        y += font.get_linesize()


def draw_frame(screen, font, bodies, aim_start=None, mouse_pos=None, panel_lines=None):
    """
    Draws a complete frame: background, aiming graphics, bodies, then the
    settings panel on top if it is visible.
    """
    screen.fill(constants.BLACK)
    if aim_start is not None:
        draw_aim(screen, aim_start, mouse_pos)
    draw_bodies(screen, bodies)
    if panel_lines is not None:
        draw_panel(screen, font, panel_lines)
    pygame.display.flip()
