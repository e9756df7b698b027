width = 400
height = 400


def sqrt(x):
    return pow(x, 0.5)


def inv_hypot(a, b):
    return 1 / max(sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2), 1e-9)


def normalize(p):
    return [p[0] / width, p[1] / height]


def smoothstep(edge0, edge1, x):
    if x < edge0:
        return 0
    if x >= edge1:
        return 1
    x = (x - edge0) / (edge1 - edge0)
    return x * x * (3 - 2 * x)


def color(x, y, frame, mouse_x, mouse_y):
    mb1 = [0.5, 0.5]
    mb2 = normalize([mouse_x, mouse_y])
    pos = normalize([x, y])

    total = inv_hypot(pos, mb1) + inv_hypot(pos, mb2)
    total = smoothstep(9.9, 10, total) * 255
    return [total, total, total]
