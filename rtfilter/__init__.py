"""
rtfilter - real-time MIDI filter chains for Python.

Incoming performance events (note-on/off, control change) are passed through
a chain of filters. Each filter runs a transform that turns one input note into
zero or more derived notes, sent immediately or scheduled for later:

- **Stair-step.** Up-down arpeggios climbing away from the played note.
- **Pedal tone.** A held pedal note, the played note and its fifth.
- **Chord tone.** The diatonic triad or seventh built on the played note.
- **Delay echo.** Repeats of the played note, each one quieter.
- **Offset tone.** The played note doubled at a fixed interval.

Filters react to chosen event kinds, can be gated on a trigger note or value,
and decide whether later filters also see the same event.

Minimal example:

    ```python
    import asyncio
    import rtfilter

    controller = rtfilter.Controller(input_device_name="keyboard", output_device_name="synth")
    controller.add_filter("stair", ["note_on", "note_off"], rtfilter.StairStep(delay=0.2, feedback=4))

    asyncio.run(controller.run())
    ```

Package-level exports: ``Controller``, ``Event``, ``FilterChain``, ``Gate``,
``Scheduler``, and the transforms ``StairStep``, ``PedalTone``, ``ChordTone``,
``DelayEcho``, ``OffsetTone``.
"""

import rtfilter.chain
import rtfilter.controller
import rtfilter.events
import rtfilter.gate
import rtfilter.scheduler
import rtfilter.transforms


Controller = rtfilter.controller.Controller
Event = rtfilter.events.Event
FilterChain = rtfilter.chain.FilterChain
Gate = rtfilter.gate.Gate
Scheduler = rtfilter.scheduler.Scheduler

StairStep = rtfilter.transforms.StairStep
PedalTone = rtfilter.transforms.PedalTone
ChordTone = rtfilter.transforms.ChordTone
DelayEcho = rtfilter.transforms.DelayEcho
OffsetTone = rtfilter.transforms.OffsetTone
