def print_info(iterations, root, best, nodes, elapsed):
    best_str = repr(best.move) if best is not None else "-"
    ips = int(iterations / elapsed) if elapsed > 0 else 0
    win_pct = root.win_rate * 100.0
    draw_pct = root.draw_rate * 100.0

    if not root.is_fully_calculated:
        state_str = "searching"
    elif root.bound.name != "NONE":
        state_str = f"solved {root.bound.name.lower()}"
    else:
        state_str = "solved"

    print(f"info iterations {iterations} visits {root.visits} win {win_pct:.1f}% draw {draw_pct:.1f}% "
          f"nodes {nodes} ips {ips} time {elapsed:.2f} {state_str} best {best_str}")
