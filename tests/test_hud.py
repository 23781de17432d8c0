from signtrainer.hud import blank_frame, draw_bar, draw_menu, draw_snapshot


def test_snapshot_overlay_draws_on_frame(controller, clock, catalog) -> None:
    controller.start("A")
    controller.detector.send(True)
    frame = blank_frame(320, 240)
    out = draw_snapshot(frame, controller.snapshot())
    assert out is frame
    assert frame.shape == (240, 320, 3)
    assert frame.any()


def test_idle_snapshot_and_menu(controller, catalog, progress) -> None:
    progress.record_success("E", 10)
    frame = blank_frame()
    draw_snapshot(frame, controller.snapshot())
    draw_menu(frame, catalog.list(), progress.as_dict(), selected="E")
    assert frame.any()


def test_bar_fill_is_clamped() -> None:
    frame = blank_frame(100, 20)
    draw_bar(frame, (0, 0), (50, 10), 2.0)
    assert frame[5, 25].any()
    assert not frame[5, 80].any()
