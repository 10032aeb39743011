# itfliesby

Building blocks for a small 2D game engine. You can use each one without the others:

- **Memory** (`itfliesby.memory_core`, `itfliesby.allocators`)
  - An `Arena` wraps a buffer that you supply. It is split into `Partition`s with `Arena.create_partition()`.
  - Each partition holds allocator headers. The two allocators are `LinearAllocator` and `BlockAllocator`.
  - `LinearAllocator.allocate()` returns consecutive `memoryview` slices until `reset()` is called.
  - `BlockAllocator.allocate()` returns fixed-size blocks. Blocks handed back with `free()` are reused lowest first.
  - Running out of room raises `NotEnoughArenaMemoryError`, `NotEnoughPartitionMemoryError` or `NotEnoughAllocatorMemoryError`.
  - Bad arguments raise `InvalidArgumentError`.
  - All of these errors are subclasses of `AllocationError` and carry a numeric `code`.
- **Renderer memory** (`itfliesby.renderer_memory`)
  - `RendererMemory` sets up a 64 MiB arena with a core partition and a uniform-buffer partition, each with a linear allocator.
  - `allocate_core()` and `allocate_uniform_buffer_memory()` draw from those allocators.
- **Render maths** (`itfliesby.render_geometry`, `itfliesby.render_types`)
  - `perspective()` builds the orthographic 3×3 projection for a resolution. `Perspective.apply()` projects a point.
  - `viewport()` fits the largest rectangle with the screen's aspect ratio, centred, into a window.
  - `scale_factor()` gives the window-to-screen ratio on each axis.
  - `ColorHex` and `ColorNormalized` convert into each other with `normalize_color()` and `color_to_hex()`.
- **Render batches** (`itfliesby.render_batches`)
  - `SimpleQuadBatch` collects up to 32 textured quads for a frame. `SolidQuadBatch` collects up to 128 solid quads.
  - A batch that cannot take the quads raises `BatchFullError`.
  - `SimpleQuadBatch.drain()` returns the queued quads and empties the batch.
  - `SolidQuadBatch.pack_uniforms()` lays transforms and colours out as consecutive uniform blocks.
  - `Shader.is_valid()` checks that a program and both of its stages have ids.
- **Asset files** (`itfliesby.asset_format`, `itfliesby.asset_builder`)
  - `AssetFileHeader`, `AssetIndex` and `AssetFileType` describe the packed `IFB` asset format.
  - `build_asset_file()` turns a list of `CsvEntry` values into one asset file. `parse_csv()` makes that list from CSV text.
- **Guesstimater** (`itfliesby.guesstimater`)
  - `processor_info()` reads the core count, processor speed and cache line size. A value is 0 when it cannot be determined.
  - `frame_cycles()` estimates how many cycles each frame may spend at 30, 60, 120 and 240 fps.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Command-line tools

### Frame budget

```
itfliesby-guesstimater
```

This prints the processor information and the theoretical cycles per frame.

### Asset file builder

```
itfliesby-asset-builder assets.csv game.ifb 0
```

The command takes three arguments:

1. The CSV listing.
2. The output file.
3. An asset file type: `0` for text, `1` for image, `2` for model.

The type is checked to be one of those values; it does not change how the assets are stored.

Each CSV line is `path,tag`. Empty lines and empty fields are skipped. A tag must fit in 31 bytes.

```
sprites/connor.png,connor
text/intro.txt,intro
```

`classify_path()` assigns each asset a type from its extension:

- `.png` files are images. They are decoded with Pillow and stored as width and height (little-endian signed 32-bit integers), followed by RGBA pixels with the bottom row first.
- `.fbx` files are classified as models.
- Everything else is text.

Models and text are both stored as the file's bytes followed by one NUL byte.

If an asset cannot be opened, the builder logs it and skips it. Its index keeps an empty tag and zero sizes.

On success the command prints `ASSET FILE BUILT SUCCESSFULLY`. On failure it prints the error to standard error. The exit status is the result code (`ReturnCode`): 0 for success, otherwise an `0x8000000N` value.

## The IFB format

For `n` assets, an asset file starts with a header of `header_size(n)` bytes:

| field        | size            |
|--------------|-----------------|
| `"IFB"`      | 3 bytes         |
| index count  | u32             |
| indexes      | 44 bytes each   |

Each index is a NUL-padded 32-byte tag followed by three u32 values:

1. The size of the source file.
2. The size to allocate when the asset is loaded.
3. The offset of the asset's data in the file.

All integers are little-endian and nothing is padded between fields. `AssetFileHeader.pack()` writes this header and `AssetFileHeader.unpack()` reads it back.

An image asset takes `image_allocation_size_bytes(width, height)` bytes: eight bytes of dimensions plus `image_size_bytes(width, height)` bytes of pixels.

## Library use

```python
from itfliesby.render_geometry import perspective, viewport
from itfliesby.asset_format import classify_path, header_size
from itfliesby.memory_core import Arena
from itfliesby.allocators import LinearAllocator

projection = perspective(1920.0, 1080.0)
view = viewport(1024.0, 768.0, 1920.0, 1080.0)

print(classify_path("sprites/jig.png"))   # AssetFileType.IMAGE
print(header_size(3))                     # 139

arena = Arena("GAME", bytearray(4096))
partition = arena.create_partition("SCRATCH", 1024)
scratch = LinearAllocator(partition, "FRAME", 256)
chunk = scratch.allocate(64)
```

## What this package does not do

- It draws nothing. There is no window, graphics context, shader compilation, texture upload or game loop. The batches, projections, viewports and uniform layouts are prepared as plain data, ready to be handed to a graphics library.
- It does not read keyboard, mouse or gamepad input.
- It writes asset files and reads their headers back. It has no loader that pulls asset data out of an asset file for a running game.