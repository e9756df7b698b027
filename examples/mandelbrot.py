loop = False

# Adjust these to zoom in/out on different areas of the fractal.
box_upper_left = [-0.75, -0.2]
box_size = 0.05
max_iterations = 100


def dist(x1, y1, x2, y2):
    dx = (x1 - x2) ** 2
    dy = (y1 - y2) ** 2
    return pow(dx + dy, 0.5)


# lerp and iter_to_color only pick colors; they take no part in the fractal.
def lerp(color_a, color_b, amt):
    return [a + (b - a) * amt for a, b in zip(color_a, color_b)]


def iter_to_color(norm):
    if norm < 0.333:
        return lerp([0, 0, 0], [0, 7, 100], norm * 3)
    if norm < 0.666:
        return lerp([0, 7, 100], [237, 255, 255], 3 * (norm - 0.333))
    return lerp([237, 255, 255], [255, 170, 0], 3 * (norm - 0.666))


def color(x, y):
    # pixel coords to real-world coords
    x = box_upper_left[0] + box_size * x / width
    y = box_upper_left[1] - box_size + box_size * y / height

    a, b = x, y
    n = 0
    # iterations until it escapes to infinity-ish (16)
    while n < max_iterations:
        aa = a * a
        bb = b * b
        twoab = 2.0 * a * b
        a = aa - bb + x
        b = twoab + y
        if dist(aa, bb, 0, 0) > 16:
            break
        n += 1

    norm = 0 if n == max_iterations else n / max_iterations
    return iter_to_color(norm)
