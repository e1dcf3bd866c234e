import logging
from argparse import Action, ArgumentParser
from contextlib import ExitStack
from pathlib import Path

VERBOSE = False


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


from mandelbrot_explorer import (
    PRESETS,
    ConfigError,
    ExplorerConfig,
    IdleQueue,
    ParameterBlockRenderer,
    RenderCoordinator,
    decode_list,
    gradient_from_colormap,
    gradient_swatch,
    preset_gradient,
)


class _SessionStep(Action):
    """Collects pan/zoom/resize options into one list, in command-line order."""

    def __call__(self, parser, namespace, values, option_string=None):
        steps = list(getattr(namespace, self.dest, None) or [])
        steps.append((self.const, tuple(values)))
        setattr(namespace, self.dest, steps)


def build_parser():
    parser = ArgumentParser(description='Replay a headless Mandelbrot exploration session.')

    parser.add_argument('--width', type=int,
                        dest='width', help='width of the drawing surface in pixels',
                        metavar='WIDTH', default=800)

    parser.add_argument('--height', type=int,
                        dest='height', help='height of the drawing surface in pixels',
                        metavar='HEIGHT', default=600)

    parser.add_argument('--gradient', type=str,
                        dest='gradient', help='preset name (%s) or comma-separated colour names / hex values' % ', '.join(PRESETS),
                        metavar='GRADIENT', default=None)

    parser.add_argument('--colormap', type=str,
                        dest='colormap', help='matplotlib colormap to sample gradient stops from (e.g. "viridis", "inferno")',
                        metavar='COLORMAP', default=None)

    parser.add_argument('--stops', type=int,
                        dest='stops', help='number of stops sampled from --colormap',
                        metavar='STOPS', default=8)

    parser.add_argument('--gradient-period', type=int,
                        dest='gradient_period', help='gradient period as a percentage of the iteration limit',
                        metavar='PERCENT', default=20)

    parser.add_argument('--bailout-radius', type=float,
                        dest='bailout_radius', help='escape radius handed to the renderer',
                        metavar='RADIUS', default=256.0)

    parser.add_argument('--max-iterations', type=int,
                        dest='max_iterations', help='iteration limit handed to the renderer',
                        metavar='MAX_ITERATIONS', default=5000)

    parser.add_argument('--pan', dest='steps', action=_SessionStep, const='pan', nargs=2, type=float,
                        metavar=('DX', 'DY'), help='drag the view by DX, DY pixels. May be repeated.')

    parser.add_argument('--zoom', dest='steps', action=_SessionStep, const='zoom', nargs=3, type=int,
                        metavar=('X', 'Y', 'STEPS'),
                        help='turn the wheel STEPS notches at pixel X, Y (negative zooms out). May be repeated.')

    parser.add_argument('--resize', dest='steps', action=_SessionStep, const='resize', nargs=2, type=int,
                        metavar=('W', 'H'), help='resize the drawing surface. May be repeated.')

    parser.add_argument('--blocks', type=str,
                        dest='blocks', help='file to stream the packed 128-byte parameter block of every draw to',
                        metavar='PATH', default=None)

    parser.add_argument('--preview', type=str,
                        dest='preview', help='save a swatch of the final gradient. Any extension supported by Pillow.',
                        metavar='PATH', default=None)

    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Enable verbose logging, including per-draw coordinates and renderer diagnostics.')

    return parser


def resolve_gradient(opt, parser: ArgumentParser):
    if opt.gradient is not None and opt.colormap is not None:
        parser.error("--gradient and --colormap cannot be combined.")

    if opt.colormap is not None:
        if opt.stops < 1:
            parser.error("--stops must be at least 1.")
        try:
            return gradient_from_colormap(opt.colormap, opt.stops)
        except KeyError:
            parser.error(f"Unknown colormap '{opt.colormap}'.")

    if opt.gradient is None:
        return None

    try:
        return preset_gradient(opt.gradient)
    except KeyError:
        return decode_list(opt.gradient)


def _pil_format_name(ext: str) -> str:
    upper = ext.upper()
    if upper == "JPG":
        return "JPEG"
    if upper == "TIF":
        return "TIFF"
    return upper


def run_session(coordinator: RenderCoordinator, renderer: ParameterBlockRenderer, queue: IdleQueue, steps) -> None:
    """Apply the recorded steps the way the window's event handlers would."""

    total = len(steps)
    for index, (kind, values) in enumerate(steps):
        log("step {0} out of {1}: {2} {3}".format(index + 1, total, kind, values))
        if kind == 'pan':
            coordinator.on_pan(*values)
        elif kind == 'zoom':
            x, y, notches = values
            for _ in range(abs(notches)):
                coordinator.on_wheel(x, y, notches)
        elif kind == 'resize':
            renderer.set_surface_extent(*values)
            coordinator.on_surface_resized()
        queue.run_pending()


def run(argv=None):
    """Parse ``argv``, replay the session and return the coordinator."""

    global VERBOSE

    parser = build_parser()
    opt = parser.parse_args(argv)
    VERBOSE = bool(opt.verbose)

    if VERBOSE:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if opt.width <= 0 or opt.height <= 0:
        parser.error("--width and --height must be positive.")

    gradient = resolve_gradient(opt, parser)
    settings = dict(
        bailout_radius=opt.bailout_radius,
        max_iterations=opt.max_iterations,
        gradient_period=opt.gradient_period,
    )
    if gradient is not None:
        settings["gradient"] = gradient
    try:
        config = ExplorerConfig(**settings)
    except ConfigError as exc:
        parser.error(str(exc))

    with ExitStack() as stack:
        stream = None
        if opt.blocks:
            blocks_path = Path(opt.blocks).expanduser().resolve()
            blocks_path.parent.mkdir(parents=True, exist_ok=True)
            stream = stack.enter_context(open(blocks_path, "wb"))

        renderer = ParameterBlockRenderer(opt.width, opt.height, stream=stream)
        queue = IdleQueue()
        coordinator = RenderCoordinator(renderer, config=config, scheduler=queue, on_status=log)

        # The window draws once it has finished loading.
        coordinator.schedule_deferred_draw()
        queue.run_pending()

        run_session(coordinator, renderer, queue, opt.steps or [])

    rect = coordinator.viewport.rectangle
    center_x, center_y = rect.center
    print("Surface: {0}x{1}".format(coordinator.viewport.surface_width, coordinator.viewport.surface_height))
    print("Zoom level: {0}".format(coordinator.viewport.zoom_level))
    print("Center: ({0:.17g}, {1:.17g})".format(center_x, center_y))
    print("Bounds: left={0:.17g} right={1:.17g} top={2:.17g} bottom={3:.17g}".format(
        rect.left, rect.right, rect.top, rect.bottom))
    print("Gradient: {0}".format(coordinator.gradient_text))
    print("Draws: {0}".format(coordinator.draw_count))
    if coordinator.last_render_ms is not None:
        print("Render time: {0} ms.".format(int(coordinator.last_render_ms)))

    if opt.preview:
        preview_path = Path(opt.preview).expanduser().resolve()
        image_format = preview_path.suffix.lstrip(".") or "png"
        if not preview_path.suffix:
            preview_path = preview_path.with_suffix(".png")
        preview_path.parent.mkdir(parents=True, exist_ok=True)
        gradient_swatch(coordinator.gradient).save(str(preview_path), format=_pil_format_name(image_format))
        log("Gradient preview written to %s" % preview_path)

    return coordinator


def main(argv=None):
    run(argv)


if __name__ == '__main__':
    main()
