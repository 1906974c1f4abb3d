# lidarview

This library works with Velodyne HDL-32 lidar data. It also holds the
matrix, lighting and geometry maths of a few small 3-D demo scenes.

- `lidarview.pcap` reads classic pcap capture files, in either byte order and
  with micro- or nanosecond timestamps. It provides `read_pcap`, `is_udp` and
  `lidar_payloads`. `lidar_payloads` yields `(timestamp, payload)` for every UDP
  packet, with the 42 header bytes removed. A file that is not a pcap capture
  raises `PcapError`.
- `lidarview.hdl32` decodes 1206-byte HDL-32 data packets with `parse_packet`.
  `compute_xyzi` and `hdl32_corrections` turn the decoded returns into
  `PointXYZI` points. `SweepAssembler` collects those points into whole sweeps.
  A sweep ends whenever the rotational position goes backwards.
- `lidarview.grabber` provides `LidarGrabber`. It replays a pcap file, keeping
  the capture's timing, or listens on a UDP port (2368 by default). It reads
  packets on one thread and decodes them on another. Every callback you
  register receives each completed sweep.
- `lidarview.transforms` provides immutable `Matrix4` and `Quaternion` types:
  translate, scale, rotate, `look_at`, `perspective`, `frustum`, `ortho` and
  `map_point`. Combine matrices with `a @ b`.
- `lidarview.cube` holds the fixed meshes: `build_cube`, `build_textured_quad`
  and `axis_points`.
- `lidarview.scene` covers the flashlight scene. It has `ArcballRotation`, a
  mouse-driven spin that slows down with friction, and `FpsCounter`. It also
  has `Material`, whose shininess goes up with key `A` and down with key `D`,
  and `cube_positions`, `flashlight_uniforms` and `model_matrices`.
- `lidarview.multilight` covers the multi-light scene. It provides
  `point_light_positions`, `multilight_uniforms` and `light_cube_matrices`.

## Install

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Library use

Streaming sweeps from a capture:

```python
import time

from lidarview.grabber import LidarGrabber

with LidarGrabber(pcap_file="capture.pcap") as grabber:
    grabber.register_callback(lambda sweep: print(len(sweep), "points"))
    grabber.start()
    while grabber.is_running():
        time.sleep(0.1)
```

When the `with` block ends, the grabber stops its threads and closes its socket.

Decoding a single packet:

```python
from lidarview.hdl32 import SweepAssembler, parse_packet

packet = parse_packet(payload)           # payload: 1206 bytes
assembler = SweepAssembler()
finished_sweeps = assembler.feed(payload)
```

## What this package does not do

This is a library only. It installs no command-line program. It does not open
a window or draw anything: the matrices, meshes and uniform values describe a
scene, and rendering them is up to your own graphics code. It does not read PCD
point-cloud files.