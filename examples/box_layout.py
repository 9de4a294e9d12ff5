"""Example: lay out three panels in a row with the constraint solver."""

from devize import ConstraintSolver, box_layout_constraints

PANELS = [
    {'id': 'title', 'width': 120, 'height': 20},
    {'id': 'plot', 'width': 400, 'height': 300},
    {'id': 'legend', 'width': 80, 'height': 60},
]

if __name__ == '__main__':
    solver = ConstraintSolver()
    boxes = box_layout_constraints(
        solver,
        PANELS,
        direction='horizontal',
        spacing=12,
        padding=8,
        align='center',
        container_height=320,
    )
    ok = solver.solve()
    print(f'Solved: {ok} after {solver.last_report.iterations} pass(es)')
    for name, box in boxes.items():
        print(
            f"{name}: x={box['x'].value:.2f} y={box['y'].value:.2f} "
            f"w={box['width'].value:.2f} h={box['height'].value:.2f}"
        )
